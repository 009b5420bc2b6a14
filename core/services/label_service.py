"""Derive a photo label and its taken/modified dates from metadata sections.

Label candidates are gathered from XMP, the EXIF IFD0 section and the
QuickTime metadata header, in that order. Exact duplicates are dropped
keeping the first occurrence and the survivors are joined with newlines.

The taken date is the first parsable value of ``xmp:CreateDate``,
``photoshop:DateCreated``, EXIF ``Date/Time`` and QuickTime ``creationdate``.
The modified date only comes from ``xmp:ModifyDate``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from core.dates import parse_metadata_datetime
from core.errors import AmbiguousMetadataSectionError
from core.models import MetadataSection

XMP_SECTION = "XMP"
EXIF_IFD0_SECTION = "Exif IFD0"
QUICKTIME_SECTION = "QuickTime Metadata Header"

XMP_ARTWORK_DESCRIPTION = "Iptc4xmpExt:ArtworkContentDescription"
XMP_CREATE_DATE = "xmp:CreateDate"
XMP_PHOTOSHOP_DATE_CREATED = "photoshop:DateCreated"
XMP_MODIFY_DATE = "xmp:ModifyDate"

EXIF_LABEL_TAGS = (
    "Image Description",
    "Windows XP Subject",
    "Windows XP Title",
    "Windows XP Comment",
)
EXIF_DATE_TAG = "Date/Time"

QUICKTIME_DESCRIPTION_TAG = "Description"
QUICKTIME_CREATION_DATE_TAG = "creationdate"

LABEL_SEPARATOR = "\n"


@dataclass(frozen=True)
class PhotoInfo:
    """Label and dates derived from one file's metadata."""

    label: str | None = None
    taken_date: datetime | None = None
    modified_date: datetime | None = None


def derive_photo_info(sections: Sequence[MetadataSection]) -> PhotoInfo:
    """Compute label, taken date and modified date for one file.

    Raises:
        AmbiguousMetadataSectionError: more than one EXIF IFD0 or QuickTime
            metadata header section is present.
    """
    xmp_sections = [s for s in sections if s.name == XMP_SECTION]
    exif = _single_section(sections, EXIF_IFD0_SECTION)
    quicktime = _single_section(sections, QUICKTIME_SECTION)

    candidates: list[str] = []
    for xmp in xmp_sections:
        artwork = xmp.get_property(XMP_ARTWORK_DESCRIPTION)
        if artwork:
            candidates.append(artwork)
    if exif is not None:
        for tag_name in EXIF_LABEL_TAGS:
            tag = exif.get_tag(tag_name)
            if tag is not None and tag.description and tag.description.strip():
                candidates.append(tag.description)
    if quicktime is not None:
        tag = quicktime.get_tag(QUICKTIME_DESCRIPTION_TAG)
        if tag is not None and tag.raw is not None:
            candidates.append(str(tag.raw))

    return PhotoInfo(
        label=join_labels(candidates),
        taken_date=_taken_date(xmp_sections, exif, quicktime),
        modified_date=_first_xmp_date(xmp_sections, XMP_MODIFY_DATE),
    )


def join_labels(candidates: Sequence[str]) -> str | None:
    """Deduplicate `candidates` keeping first-seen order and join with newlines."""
    unique = list(dict.fromkeys(candidates))
    if not unique:
        return None
    return LABEL_SEPARATOR.join(unique)


def _single_section(sections: Sequence[MetadataSection], name: str) -> MetadataSection | None:
    matches = [s for s in sections if s.name == name]
    if len(matches) > 1:
        raise AmbiguousMetadataSectionError(name, len(matches))
    return matches[0] if matches else None


def _first_xmp_date(xmp_sections: Sequence[MetadataSection], path: str) -> datetime | None:
    for xmp in xmp_sections:
        parsed = parse_metadata_datetime(xmp.get_property(path))
        if parsed is not None:
            return parsed
    return None


def _taken_date(
    xmp_sections: Sequence[MetadataSection],
    exif: MetadataSection | None,
    quicktime: MetadataSection | None,
) -> datetime | None:
    for path in (XMP_CREATE_DATE, XMP_PHOTOSHOP_DATE_CREATED):
        taken = _first_xmp_date(xmp_sections, path)
        if taken is not None:
            return taken
    if exif is not None:
        tag = exif.get_tag(EXIF_DATE_TAG)
        taken = parse_metadata_datetime(tag.description if tag else None)
        if taken is not None:
            return taken
    if quicktime is not None:
        tag = quicktime.get_tag(QUICKTIME_CREATION_DATE_TAG)
        if tag is not None and tag.raw is not None:
            return parse_metadata_datetime(str(tag.raw))
    return None
