"""Rename labelled photos to ``<prefix>. <label>.<ext>`` with bounded concurrency.

Each item computes its candidate name, probes for a free ``" (n)"`` variant
when the name is taken, moves the file and then restores the creation and
last-write times from the photo's metadata dates. Probing and claiming a
target is serialized per directory and tracked in a claimed-path set, so
concurrent items with the same label never pick the same target.
"""

from __future__ import annotations

from collections.abc import Iterable
import os
import threading

from loguru import logger

from core.config import LabelerConfig
from core.errors import LabelMissingError
from core.models import Photo
from core.services.filename_service import build_candidate_path
from core.services.interfaces import IFileSystem, RenamingResult
from core.services.sort_service import SortService
from core.services.task_runner import BoundedTaskRunner, first_error_message


class _TargetClaims:
    """Paths reserved by the running batch, guarded by one lock per directory."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._claimed: set[str] = set()

    def lock_for(self, directory: str) -> threading.Lock:
        key = os.path.normcase(os.path.abspath(directory))
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def is_claimed(self, path: str) -> bool:
        return os.path.normcase(path) in self._claimed

    def claim(self, path: str) -> None:
        self._claimed.add(os.path.normcase(path))


class RenameService:
    """Coordinates renaming of a folder's labelled photos."""

    def __init__(
        self,
        filesystem: IFileSystem,
        config: LabelerConfig | None = None,
        runner: BoundedTaskRunner | None = None,
        sorter: SortService | None = None,
    ) -> None:
        self._fs = filesystem
        self._config = config or LabelerConfig()
        self._runner = runner or BoundedTaskRunner(self._config.concurrency)
        self._sorter = sorter or SortService()

    def rename_batch(
        self,
        base_path: str,
        photos: Iterable[Photo],
        add_sort_prefix: bool | None = None,
        cancel_event: threading.Event | None = None,
    ) -> RenamingResult:
        """Rename every labelled photo in `base_path`.

        Unlabelled photos are skipped. The chronological position of each
        photo (taken date, else file creation time) is its 1-based ordinal.
        Failures are collected per item and never stop the other items.
        """
        if add_sort_prefix is None:
            add_sort_prefix = self._config.add_sort_prefix
        labelled = [p for p in photos if p.has_label]
        result = RenamingResult(total_files=len(labelled))
        if not labelled:
            return result

        ordered = self._sorter.order_for_renaming(
            labelled, lambda path: self._fs.get_creation_time(os.path.join(base_path, path))
        )
        total = len(ordered)
        jobs = list(enumerate(ordered, start=1))
        claims = _TargetClaims()

        logger.info(
            "Renaming {} labelled files in {} (prefix={})", total, base_path, add_sort_prefix
        )
        outcomes = self._runner.run(
            lambda job: self._rename(base_path, job[1], job[0], total, add_sort_prefix, claims),
            jobs,
            cancel_event=cancel_event,
        )
        for outcome in outcomes:
            if outcome.ok:
                if outcome.value:
                    result.files_renamed += 1
                continue
            _, photo = outcome.item
            message = f"{os.path.basename(photo.path)}: {first_error_message(outcome)}"
            logger.error("Rename failed: {}", message)
            result.errors.append(message)

        logger.info(
            "Rename finished in {}: {} of {} renamed, {} errors",
            base_path,
            result.files_renamed,
            result.total_files,
            len(result.errors),
        )
        return result

    def rename_item(
        self,
        base_path: str,
        photo: Photo,
        ordinal_index: int,
        total_count: int,
        add_sort_prefix: bool,
    ) -> bool:
        """Rename one photo; return True if the file was moved.

        Only the filesystem decides which names are taken; claims made here
        do not outlive the call.

        Raises:
            LabelMissingError: the photo has no label.
            FileNameBudgetError: no room is left for the label.
            OSError: the move failed.
        """
        return self._rename(
            base_path, photo, ordinal_index, total_count, add_sort_prefix, _TargetClaims()
        )

    def _rename(
        self,
        base_path: str,
        photo: Photo,
        ordinal_index: int,
        total_count: int,
        add_sort_prefix: bool,
        claims: _TargetClaims,
    ) -> bool:
        label = photo.label
        if label is None or not photo.has_label:
            raise LabelMissingError(photo.path)

        current = os.path.join(base_path, photo.path)
        extension = os.path.splitext(photo.path)[1]

        def candidate(duplicate_index: int) -> str:
            return build_candidate_path(
                base_path,
                label,
                extension,
                duplicate_index=duplicate_index,
                ordinal_index=ordinal_index,
                total_count=total_count,
                add_sort_prefix=add_sort_prefix,
                max_length=self._config.max_file_name_length,
            )

        target = candidate(0)
        with claims.lock_for(base_path):
            duplicate_index = 1
            while target != current and (
                self._fs.exists(target) or claims.is_claimed(target)
            ):
                target = candidate(duplicate_index)
                duplicate_index += 1
            claims.claim(target)

        if target == current:
            # Already carries its name (possibly with a collision suffix)
            self._restore_times(photo, target)
            return False

        self._fs.move(current, target)
        logger.debug("Renamed {} -> {}", current, target)
        self._restore_times(photo, target)
        return True

    def _restore_times(self, photo: Photo, path: str) -> None:
        if photo.taken_date is not None:
            if not self._fs.set_creation_time(path, photo.taken_date):
                logger.debug("Could not set creation time on {}", path)
        last_write = photo.modified_date or photo.taken_date
        if last_write is not None:
            if not self._fs.set_last_write_time(path, last_write):
                logger.debug("Could not set last-write time on {}", path)
