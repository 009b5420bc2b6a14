"""Shared fixtures and fakes for the photo labeler test suite."""

from __future__ import annotations

from datetime import datetime
import os
import threading
import time

from loguru import logger
import pytest

from core.models import MetadataSection, TagValue
from core.services.interfaces import IMetadataReader
from infrastructure.filesystem import LocalFileSystem


def make_files(folder, names):
    """Create empty files `names` inside `folder` and return their paths."""
    folder.mkdir(parents=True, exist_ok=True)
    paths = []
    for name in names:
        path = folder / name
        path.write_bytes(b"data")
        paths.append(path)
    return paths


def exif_section(tags: dict[str, str]) -> MetadataSection:
    """Build an "Exif IFD0" section from tag display names."""
    return MetadataSection(
        name="Exif IFD0",
        tags={k: TagValue(raw=v, description=v) for k, v in tags.items()},
    )


def xmp_section(properties: dict[str, str]) -> MetadataSection:
    """Build an "XMP" section from property paths."""
    return MetadataSection(name="XMP", properties=dict(properties))


def quicktime_section(tags: dict[str, str]) -> MetadataSection:
    """Build a "QuickTime Metadata Header" section."""
    return MetadataSection(
        name="QuickTime Metadata Header",
        tags={k: TagValue(raw=v, description=v) for k, v in tags.items()},
    )


class FakeReader(IMetadataReader):
    """Returns canned sections keyed by file name."""

    def __init__(self, by_name=None):
        self.by_name = dict(by_name or {})
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def read_metadata(self, path):
        with self._lock:
            self.calls.append(path)
        return self.by_name.get(os.path.basename(path))


class FlakyFileSystem(LocalFileSystem):
    """Local filesystem whose moves fail for selected source names."""

    def __init__(self, fail_on=(), move_delay: float = 0.0, creation_times=None):
        self.fail_on = set(fail_on)
        self.move_delay = move_delay
        self.creation_times = dict(creation_times or {})
        self.moves: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def move(self, src, dst):
        if os.path.basename(src) in self.fail_on:
            raise PermissionError(13, "Permission denied", src)
        if self.move_delay:
            time.sleep(self.move_delay)
        super().move(src, dst)
        with self._lock:
            self.moves.append((src, dst))

    def get_creation_time(self, path):
        name = os.path.basename(path)
        if name in self.creation_times:
            return self.creation_times[name]
        return super().get_creation_time(path)


@pytest.fixture
def media_folder(tmp_path):
    """An empty folder for media files."""
    folder = tmp_path / "photos"
    folder.mkdir()
    return folder


@pytest.fixture
def fixed_dates():
    """Distinct, increasing timestamps."""
    return [datetime(2020, 1, day, 12, 0, 0) for day in range(1, 29)]


@pytest.fixture(autouse=True)
def _reset_logger():
    """Drop sinks added by a test (e.g. via init_logging)."""
    yield
    logger.remove()
