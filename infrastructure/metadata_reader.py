"""Metadata extraction for images (Pillow) and videos (MediaInfo).

Images yield an ``Exif IFD0`` section and one ``XMP`` section per XMP
packet found; QuickTime/MP4 videos yield a ``QuickTime Metadata Header``
section built from MediaInfo's General track. Any failure to read a file
is reported as None so the caller can treat it as "no metadata".
"""

from __future__ import annotations

from pathlib import Path
import struct
from typing import Any

from PIL import Image
from loguru import logger
from pymediainfo import MediaInfo

from core.models import MetadataSection, TagValue
from core.services.interfaces import IMetadataReader
from core.services.label_service import EXIF_IFD0_SECTION, QUICKTIME_SECTION, XMP_SECTION
from infrastructure.xmp import parse_xmp_properties

try:  # pragma: no cover - optional dependency
    from pillow_heif import register_heif_opener  # type: ignore

    register_heif_opener()
    PIL_HEIF_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    PIL_HEIF_AVAILABLE = False

VIDEO_EXTENSIONS = {".mov", ".mp4"}

# IFD0 tag ids and their display names
EXIF_IFD0_TAG_NAMES = {
    0x010E: "Image Description",
    0x010F: "Make",
    0x0110: "Model",
    0x0112: "Orientation",
    0x0131: "Software",
    0x0132: "Date/Time",
    0x013B: "Artist",
    0x8298: "Copyright",
    0x9C9B: "Windows XP Title",
    0x9C9C: "Windows XP Comment",
    0x9C9D: "Windows XP Author",
    0x9C9E: "Windows XP Keywords",
    0x9C9F: "Windows XP Subject",
}
_XP_TAGS = {0x9C9B, 0x9C9C, 0x9C9D, 0x9C9E, 0x9C9F}
_TIFF_XMP_TAG = 0x02BC

# MediaInfo General track attributes mapped to QuickTime metadata tag names
_QUICKTIME_FIELDS = {
    "Description": (
        "com_apple_quicktime_description",
        "comapplequicktimedescription",
        "description",
    ),
    "creationdate": (
        "com_apple_quicktime_creationdate",
        "comapplequicktimecreationdate",
    ),
    "make": ("com_apple_quicktime_make", "comapplequicktimemake"),
    "model": ("com_apple_quicktime_model", "comapplequicktimemodel"),
}

_READ_ERRORS = (
    OSError,
    ValueError,
    TypeError,
    KeyError,
    SyntaxError,
    struct.error,
    Image.DecompressionBombError,
)


class MediaMetadataReader(IMetadataReader):
    """Reads metadata sections with Pillow (images) and MediaInfo (videos)."""

    def read_metadata(self, path: str) -> list[MetadataSection] | None:
        """Return the sections of `path`, or None when it cannot be read."""
        ext = Path(path).suffix.lower()
        try:
            if ext in VIDEO_EXTENSIONS:
                return self._read_video(path)
            return self._read_image(path)
        except _READ_ERRORS as ex:
            logger.debug("Metadata read failed for {}: {}", path, ex)
            return None

    def _read_image(self, path: str) -> list[MetadataSection]:
        sections: list[MetadataSection] = []
        with Image.open(path) as im:
            exif = im.getexif()
            tags: dict[str, TagValue] = {}
            for tag_id, name in EXIF_IFD0_TAG_NAMES.items():
                raw = exif.get(tag_id)
                if raw is None:
                    continue
                tags[name] = TagValue(raw=raw, description=_describe_exif(tag_id, raw))
            if tags:
                sections.append(MetadataSection(name=EXIF_IFD0_SECTION, tags=tags))

            for packet in _xmp_packets(im.info, exif.get(_TIFF_XMP_TAG)):
                properties = parse_xmp_properties(packet)
                if properties is not None:
                    sections.append(MetadataSection(name=XMP_SECTION, properties=properties))
        return sections

    def _read_video(self, path: str) -> list[MetadataSection]:
        media_info = MediaInfo.parse(path)
        general = next((t for t in media_info.tracks if t.track_type == "General"), None)
        if general is None:
            return []
        tags: dict[str, TagValue] = {}
        for tag_name, attributes in _QUICKTIME_FIELDS.items():
            for attribute in attributes:
                value = getattr(general, attribute, None)
                if value not in (None, ""):
                    tags[tag_name] = TagValue(raw=str(value), description=str(value))
                    break
        if not tags:
            return []
        return [MetadataSection(name=QUICKTIME_SECTION, tags=tags)]


def decode_xp_value(raw: Any) -> str:
    """Decode a Windows XP tag (UTF-16LE bytes or a tuple of byte values)."""
    if isinstance(raw, str):
        return raw.rstrip("\x00")
    if isinstance(raw, (tuple, list)):
        raw = bytes(raw)
    return bytes(raw).decode("utf-16-le", errors="replace").rstrip("\x00")


def _describe_exif(tag_id: int, raw: Any) -> str | None:
    if tag_id in _XP_TAGS:
        try:
            return decode_xp_value(raw)
        except (TypeError, ValueError):
            return None
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace").rstrip("\x00")
    return str(raw).rstrip("\x00")


def _xmp_packets(info: dict[str, Any], tiff_packet: Any) -> list[bytes]:
    packets: list[bytes] = []
    for key in ("xmp", "XML:com.adobe.xmp"):
        value = info.get(key)
        if isinstance(value, str):
            value = value.encode("utf-8")
        if isinstance(value, bytes) and value not in packets:
            packets.append(value)
    if not packets and isinstance(tiff_packet, (bytes, str)):
        packets.append(tiff_packet.encode("utf-8") if isinstance(tiff_packet, str) else tiff_packet)
    return packets
