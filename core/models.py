"""Core domain models for indexed photos and their metadata sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TagValue:
    """A single metadata tag: typed raw value plus optional display text."""

    raw: Any
    description: str | None = None


@dataclass(frozen=True)
class MetadataSection:
    """A named group of tags read from one file (e.g. "Exif IFD0", "XMP").

    `properties` is only populated for XMP sections and maps namespaced
    property paths such as ``xmp:CreateDate`` to their string values.
    """

    name: str
    tags: dict[str, TagValue] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)

    def get_tag(self, tag_name: str) -> TagValue | None:
        """Return the tag named `tag_name`, or None."""
        return self.tags.get(tag_name)

    def get_property(self, path: str) -> str | None:
        """Return the XMP property at `path`, or None."""
        return self.properties.get(path)


@dataclass
class Photo:
    """A single media file discovered while indexing a folder."""

    path: str
    label: str | None = None
    taken_date: datetime | None = None
    modified_date: datetime | None = None

    @property
    def has_label(self) -> bool:
        """True when the label contains non-whitespace text."""
        return bool(self.label and self.label.strip())


@dataclass
class FolderPhotos:
    """Photos found directly inside one folder."""

    folder_path: str
    photos: list[Photo] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
