"""Core service interfaces and shared data structures.

The metadata reader and filesystem are consumed through the small interfaces
below so the services can be exercised with in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from core.models import MetadataSection


@dataclass
class RenamingResult:
    """Outcome of renaming the labelled photos of one folder.

    Attributes:
        total_files: Number of labelled photos that entered the batch.
        files_renamed: Number of files actually moved (no-op renames excluded).
        errors: One message per item that failed.
    """

    total_files: int = 0
    files_renamed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """True if at least one item failed."""
        return bool(self.errors)


class IMetadataReader:
    """Interface for extracting metadata sections from a media file."""

    def read_metadata(self, path: str) -> list[MetadataSection] | None:
        """Return the sections of `path`, or None when the file cannot be read."""
        raise NotImplementedError


class IFileSystem:
    """Interface for the filesystem operations used by the core services."""

    def list_files(self, directory: str) -> list[str]:
        """Return full paths of regular files directly inside `directory`."""
        raise NotImplementedError

    def list_dirs(self, directory: str) -> list[str]:
        """Return full paths of sub-directories directly inside `directory`."""
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        """Return True if `path` exists."""
        raise NotImplementedError

    def move(self, src: str, dst: str) -> None:
        """Move `src` to `dst`; raises `OSError` on failure."""
        raise NotImplementedError

    def set_creation_time(self, path: str, value: datetime) -> bool:
        """Set the creation time of `path`; return False instead of raising."""
        raise NotImplementedError

    def set_last_write_time(self, path: str, value: datetime) -> bool:
        """Set the last-write time of `path`; return False instead of raising."""
        raise NotImplementedError

    def get_creation_time(self, path: str) -> datetime | None:
        """Return the creation time of `path`, or None when unavailable."""
        raise NotImplementedError
