"""ViewModel for orchestrating folder indexing and renaming."""

from __future__ import annotations

from loguru import logger

from app.viewmodels.photo_vm import PhotoVM
from core.models import FolderPhotos
from core.services.index_service import IndexService
from core.services.interfaces import RenamingResult
from core.services.rename_service import RenameService
from core.services.sort_service import SortService


class MainVM:
    """Main application view-model.

    Mediates between the index/rename services and whatever presents the
    folders (the command line shell here).
    """

    def __init__(
        self,
        indexer: IndexService,
        renamer: RenameService,
        sorter: SortService | None = None,
        default_sort: list[tuple[str, bool]] | None = None,
    ) -> None:
        """Create a MainVM.

        Args:
            indexer: Service that lists folders and reads photo metadata.
            renamer: Service that renames a folder's labelled photos.
            sorter: Sorting service (defaults to `SortService`).
            default_sort: List of (field_name, ascending) used for display rows.
        """
        self._indexer = indexer
        self._renamer = renamer
        self._sorter = sorter or SortService()
        self._default_sort = default_sort or []
        self.folders: list[FolderPhotos] = []
        self._root: str | None = None

    def load_folder(self, path: str, recursive: bool = False) -> None:
        """Index `path` (and its sub-folders when `recursive`)."""
        self._root = path
        self.folders = self._indexer.index_tree(path, recursive=recursive)
        logger.info(
            "Loaded {} folder(s) with {} media files from {}",
            len(self.folders),
            self.photo_count,
            path,
        )

    def rows(self, folder: FolderPhotos) -> list[PhotoVM]:
        """Display rows for `folder`, sorted with `default_sort` if provided."""
        photos = folder.photos
        if self._default_sort:
            photos = self._sorter.sort(photos, self._default_sort)
        return [PhotoVM(p) for p in photos]

    def rename_all(self, add_sort_prefix: bool | None = None) -> dict[str, RenamingResult]:
        """Rename every loaded folder and re-index it; return results per folder."""
        results: dict[str, RenamingResult] = {}
        for index, folder in enumerate(self.folders):
            result = self._renamer.rename_batch(
                folder.folder_path, folder.photos, add_sort_prefix=add_sort_prefix
            )
            results[folder.folder_path] = result
            if result.files_renamed:
                self.folders[index] = self._indexer.index_folder(folder.folder_path)
        return results

    def get_root(self) -> str | None:
        """Return the last-loaded root folder, if available."""
        return self._root

    @property
    def photo_count(self) -> int:
        """Number of media files across loaded folders."""
        return sum(len(f.photos) for f in self.folders)
