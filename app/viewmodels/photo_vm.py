"""Lightweight view model wrapper around `Photo`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.dates import format_display_datetime
from core.models import Photo

UNLABELED_TEXT = "Unlabeled"
UNKNOWN_DATE_TEXT = "unknown"


@dataclass
class PhotoVM:
    """Expose convenient properties for bindings/templates."""

    record: Photo

    @property
    def file_name(self) -> str:
        """Base name of the file path."""
        return Path(self.record.path).name

    @property
    def label_text(self) -> str:
        """Label on a single line, or a placeholder when unlabeled."""
        if not self.record.has_label:
            return UNLABELED_TEXT
        return " / ".join(line for line in (self.record.label or "").splitlines() if line)

    @property
    def taken_text(self) -> str:
        """Taken date for display, or a placeholder when unknown."""
        return format_display_datetime(self.record.taken_date, UNKNOWN_DATE_TEXT)

    @property
    def is_labeled(self) -> bool:
        """True if the photo will take part in a rename."""
        return self.record.has_label
