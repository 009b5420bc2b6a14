"""Runtime limits for indexing and renaming."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

DEFAULT_MAX_FILE_NAME_LENGTH = 260
DEFAULT_CONCURRENCY = 200
DEFAULT_SUPPORTED_EXTENSIONS = (
    ".jpg",
    ".heic",
    ".mov",
    ".png",
    ".gif",
    ".jpeg",
    ".tiff",
    ".raw",
    ".mp4",
)


@dataclass(frozen=True)
class LabelerConfig:
    """Limits shared by the index and rename services.

    Attributes:
        max_file_name_length: Longest file name produced, extension included.
        concurrency: Maximum number of in-flight file operations.
        supported_extensions: Lower-case extensions (with dot) that are indexed.
        add_sort_prefix: Default for prefixing names with their chronological ordinal.
    """

    max_file_name_length: int = DEFAULT_MAX_FILE_NAME_LENGTH
    concurrency: int = DEFAULT_CONCURRENCY
    supported_extensions: tuple[str, ...] = DEFAULT_SUPPORTED_EXTENSIONS
    add_sort_prefix: bool = True

    def is_supported(self, file_name: str) -> bool:
        """Return True if `file_name` has an allowed extension (case-insensitive)."""
        lower = file_name.lower()
        dot = lower.rfind(".")
        if dot < 0:
            return False
        return lower[dot:] in self.supported_extensions

    @classmethod
    def from_settings(cls, settings: Any | None) -> LabelerConfig:
        """Build a config from an object exposing dotted-key `get(key, default)`."""
        if settings is None:
            return cls()
        max_len = _as_positive_int(
            settings.get("limits.max_file_name_length"), DEFAULT_MAX_FILE_NAME_LENGTH
        )
        concurrency = _as_positive_int(settings.get("limits.concurrency"), DEFAULT_CONCURRENCY)
        raw_exts = settings.get("media.supported_extensions")
        exts = DEFAULT_SUPPORTED_EXTENSIONS
        if isinstance(raw_exts, list):
            cleaned = tuple(
                (e if e.startswith(".") else "." + e).lower()
                for e in raw_exts
                if isinstance(e, str) and e.strip(".")
            )
            if cleaned:
                exts = cleaned
            else:
                logger.warning("No usable supported_extensions in settings, using defaults")
        add_prefix = settings.get("rename.add_sort_prefix", True)
        return cls(
            max_file_name_length=max_len,
            concurrency=concurrency,
            supported_extensions=exts,
            add_sort_prefix=bool(add_prefix),
        )


def _as_positive_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        number = int(value)
    except (ValueError, TypeError):
        logger.warning("Invalid integer setting {!r}, using {}", value, default)
        return default
    if number <= 0:
        logger.warning("Non-positive setting {!r}, using {}", value, default)
        return default
    return number
