"""Folder indexing: discover media files and derive their labels and dates.

Metadata extraction for the files of a folder is fanned out through the
shared `BoundedTaskRunner`. A file whose metadata cannot be read becomes an
unlabeled, undated `Photo`; a file with ambiguous metadata is listed the same
way and reported in the folder's `errors`.
"""

from __future__ import annotations

import os
import threading

from loguru import logger

from core.config import LabelerConfig
from core.errors import AmbiguousMetadataSectionError
from core.models import FolderPhotos, Photo
from core.services.interfaces import IFileSystem, IMetadataReader
from core.services.label_service import derive_photo_info
from core.services.task_runner import BoundedTaskRunner, first_error_message


class IndexService:
    """Builds `FolderPhotos` for one folder or a whole tree."""

    def __init__(
        self,
        reader: IMetadataReader,
        filesystem: IFileSystem,
        config: LabelerConfig | None = None,
        runner: BoundedTaskRunner | None = None,
    ) -> None:
        self._reader = reader
        self._fs = filesystem
        self._config = config or LabelerConfig()
        self._runner = runner or BoundedTaskRunner(self._config.concurrency)

    def list_media_files(self, folder: str) -> list[str]:
        """Return file names directly inside `folder` with a supported extension."""
        names = [os.path.basename(p) for p in self._fs.list_files(folder)]
        return sorted(n for n in names if self._config.is_supported(n))

    def list_folders(self, root: str, recursive: bool = False) -> list[str]:
        """Return `root` followed by its sub-folders (all levels if `recursive`).

        Folders are ordered by depth, then by path.
        """
        root = root.rstrip("/\\") or root
        if not recursive:
            return [root]
        found: list[str] = []
        pending = [root]
        while pending:
            current = pending.pop()
            for child in self._fs.list_dirs(current):
                found.append(child)
                pending.append(child)
        found.sort(key=lambda p: (os.path.relpath(p, root).count(os.sep), p))
        return [root, *found]

    def index_folder(
        self, folder: str, cancel_event: threading.Event | None = None
    ) -> FolderPhotos:
        """Read metadata for every media file in `folder`."""
        names = self.list_media_files(folder)
        result = FolderPhotos(folder_path=folder)
        if not names:
            return result

        outcomes = self._runner.run(
            lambda name: self.build_photo(folder, name), names, cancel_event=cancel_event
        )
        for outcome in outcomes:
            name = outcome.item
            if outcome.ok and outcome.value is not None:
                result.photos.append(outcome.value)
                continue
            message = f"{name}: {first_error_message(outcome)}"
            logger.error("Indexing failed: {}", message)
            result.errors.append(message)
            result.photos.append(Photo(path=name))

        labelled = sum(1 for p in result.photos if p.has_label)
        logger.info(
            "Indexed {}: {} media files, {} labelled, {} errors",
            folder,
            len(result.photos),
            labelled,
            len(result.errors),
        )
        return result

    def index_tree(
        self, root: str, recursive: bool = False, cancel_event: threading.Event | None = None
    ) -> list[FolderPhotos]:
        """Index `root` and, when `recursive`, every folder below it."""
        return [
            self.index_folder(folder, cancel_event=cancel_event)
            for folder in self.list_folders(root, recursive=recursive)
        ]

    def build_photo(self, folder: str, name: str) -> Photo:
        """Create the `Photo` for file `name` inside `folder`.

        Raises:
            AmbiguousMetadataSectionError: the file carries duplicated
                sections that must be unique.
        """
        sections = self._reader.read_metadata(os.path.join(folder, name))
        if sections is None:
            return Photo(path=name)
        try:
            info = derive_photo_info(sections)
        except AmbiguousMetadataSectionError as ex:
            logger.warning("Ambiguous metadata in {}: {}", name, ex)
            raise
        return Photo(
            path=name,
            label=info.label,
            taken_date=info.taken_date,
            modified_date=info.modified_date,
        )
