"""Logging initialization utilities using loguru."""

from __future__ import annotations

import os
from pathlib import Path
import sys

from loguru import logger


def get_log_directory() -> str:
    """Get the main log directory path for the current platform."""
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return str(Path(base) / "PhotoLabeler" / "logs")
    state_home = os.environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    return str(Path(state_home) / "photo-labeler" / "logs")


def init_logging(
    log_dir: str | None = None, level: str = "INFO", console: bool = True
) -> Path | None:
    """Initialize rotating file logging under `log_dir` plus an optional stderr sink.

    Returns the log directory, or None when it could not be created (file
    logging is then skipped and only the console sink is installed).
    """
    if log_dir is None:
        log_dir = get_log_directory()
    log_path = Path(log_dir)

    logger.remove()
    if console:
        logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")

    try:
        log_path.mkdir(parents=True, exist_ok=True)
    except OSError as ex:
        logger.warning("Cannot create log directory {}: {}", log_dir, ex)
        return None

    logger.add(
        str(log_path / "photo_labeler_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level,
    )
    return log_path


def find_latest_log_file(log_dir: str | None = None) -> Path | None:
    """Find the latest log file in the specified directory."""
    if log_dir is None:
        log_dir = get_log_directory()

    try:
        log_path = Path(log_dir)
        if not log_path.exists():
            return None

        log_files = list(log_path.glob("photo_labeler_*.log"))
        if not log_files:
            return None

        # Return the most recently modified file
        return max(log_files, key=lambda p: p.stat().st_mtime)
    except (OSError, ValueError):
        return None
