"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)
        if not isinstance(self._data, dict):
            raise ValueError(f"settings root must be an object: {self._path}")

    @property
    def path(self) -> Path:
        """Location of the loaded settings file."""
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


def load_settings(settings_path: str | Path) -> JsonSettings | None:
    """Load `settings_path`, or return None (defaults apply) when it is unusable."""
    try:
        return JsonSettings(settings_path)
    except FileNotFoundError:
        logger.info("No settings at {}, using defaults", settings_path)
    except (OSError, ValueError) as ex:
        logger.warning("Unreadable settings {}: {}; using defaults", settings_path, ex)
    return None
