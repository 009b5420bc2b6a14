"""Best-effort parsing of the date strings found in embedded metadata.

EXIF stores ``YYYY:MM:DD HH:MM:SS``, XMP uses ISO 8601 with optional
precision and offset, and QuickTime writes ISO 8601 with a compact
``+HHMM`` offset. Offset-aware values are converted to local naive time so
they compare with filesystem timestamps. Unparsable input yields None.
"""

from __future__ import annotations

from datetime import datetime
import re

_EXIF_FORMATS = ("%Y:%m:%d %H:%M:%S", "%Y:%m:%d %H:%M", "%Y:%m:%d")
_FALLBACK_FORMATS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y-%m",
    "%Y",
)
_COMPACT_OFFSET = re.compile(r"([+-])(\d{2})(\d{2})$")
_SUBSECONDS = re.compile(r"(\d{2}:\d{2}:\d{2})[.,](\d+)")


def parse_metadata_datetime(value: str | None) -> datetime | None:
    """Parse an EXIF, XMP or QuickTime timestamp; None when not parsable."""
    if not value:
        return None
    text = str(value).strip().rstrip("\x00").strip()
    if not text:
        return None

    for fmt in _EXIF_FORMATS:
        try:
            return datetime.strptime(_drop_subseconds(text), fmt)
        except ValueError:
            continue

    iso = text
    if iso.endswith(("Z", "z")):
        iso = iso[:-1] + "+00:00"
    iso = _COMPACT_OFFSET.sub(r"\1\2:\3", iso)
    # fromisoformat only accepts 3 or 6 fractional digits on older interpreters
    iso = _SUBSECONDS.sub(lambda m: f"{m.group(1)}.{(m.group(2) + '000000')[:6]}", iso)
    try:
        return _to_local_naive(datetime.fromisoformat(iso))
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _drop_subseconds(text: str) -> str:
    return _SUBSECONDS.sub(r"\1", text)


def _to_local_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    try:
        return dt.astimezone().replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return dt.replace(tzinfo=None)


def format_display_datetime(dt: datetime | None, placeholder: str = "unknown") -> str:
    """Format `dt` for display; `placeholder` when None."""
    if dt is None:
        return placeholder
    try:
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, TypeError):
        return placeholder
