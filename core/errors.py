"""Exception types raised by the labeling and renaming services."""

from __future__ import annotations


class PhotoLabelerError(Exception):
    """Base class for all photo labeler errors."""


class AmbiguousMetadataSectionError(PhotoLabelerError):
    """More than one section of a kind that must be unique was found."""

    def __init__(self, section_name: str, count: int) -> None:
        super().__init__(f"Expected at most one '{section_name}' section, found {count}")
        self.section_name = section_name
        self.count = count


class LabelMissingError(PhotoLabelerError):
    """A rename was requested for a photo without a label."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Photo has no label: {path}")
        self.path = path


class FileNameBudgetError(PhotoLabelerError):
    """Prefix, suffix and extension leave no room for the label."""

    def __init__(self, budget: int) -> None:
        super().__init__(f"No room left for the label in the file name (budget={budget})")
        self.budget = budget
