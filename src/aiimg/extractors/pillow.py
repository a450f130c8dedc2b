"""Pillow-based EXIF, PNG text and XMP extractor."""

import logging
import re
from typing import Any, ClassVar

from PIL import ExifTags, Image
from PIL.ExifTags import GPSTAGS, TAGS
from PIL.TiffImagePlugin import IFDRational

from aiimg.extractors.base import BaseExtractor

logger = logging.getLogger(__name__)

# Tags that are pointers to sub-IFDs rather than values
IFD_POINTERS = {0x8769, 0x8825, 0xA005}

# Windows XP tags are UTF-16LE byte strings
XP_TAGS = {"XPTitle", "XPComment", "XPAuthor", "XPKeywords", "XPSubject"}

MAX_INLINE_BYTES = 20

PROVENANCE_RE = re.compile(
    r"dcterms:provenance\s*=\s*\"([^\"]*)\"|<dcterms:provenance>(.*?)</dcterms:provenance>",
    re.DOTALL,
)


def _decode_xp(value: Any) -> str:
    raw = bytes(value) if not isinstance(value, bytes) else value
    return raw.decode("utf-16-le", errors="replace").rstrip("\x00")


def _decode_user_comment(value: bytes) -> str | list[int]:
    """Decode an EXIF UserComment, which starts with an 8-byte charset header."""
    header, body = value[:8], value[8:]
    if header.startswith(b"ASCII"):
        return body.decode("ascii", errors="replace").rstrip("\x00 ")
    if header.startswith(b"UNICODE"):
        return body.decode("utf-16", errors="replace").rstrip("\x00 ")
    return _normalize(value)


def _normalize(value: Any) -> Any:
    """Convert Pillow tag values into JSON-friendly Python values."""
    if isinstance(value, IFDRational):
        return float(value)
    if isinstance(value, bytes):
        text = value.rstrip(b"\x00")
        if text and all(32 <= c < 127 or c in (9, 10, 13) for c in text):
            return text.decode("ascii")
        if len(value) > MAX_INLINE_BYTES:
            return f"[Binary Data: {len(value)} bytes]"
        return list(value)
    if isinstance(value, (tuple, list)):
        return [_normalize(v) for v in value]
    if isinstance(value, str):
        return value.rstrip("\x00")
    return value


class PillowExtractor(BaseExtractor):
    """Extract EXIF (base, Exif and GPS IFDs), PNG text chunks and XMP.

    Pillow is always installed, so this extractor is the baseline source of
    tags. Tag names follow the EXIF standard (Make, Model, Software,
    DateTimeOriginal, GPSLatitude, ...).
    """

    name: ClassVar[str] = "pillow"
    priority: ClassVar[int] = 10

    @classmethod
    def is_available(cls) -> bool:
        return True

    def extract(self, path: str) -> dict[str, Any]:
        tags: dict[str, Any] = {}
        with Image.open(path) as img:
            exif = img.getexif()

            for tag_id, value in exif.items():
                if tag_id in IFD_POINTERS:
                    continue
                self._add(tags, TAGS.get(tag_id, str(tag_id)), value)

            for tag_id, value in exif.get_ifd(ExifTags.IFD.Exif).items():
                self._add(tags, TAGS.get(tag_id, str(tag_id)), value)

            for tag_id, value in exif.get_ifd(ExifTags.IFD.GPSInfo).items():
                self._add(tags, GPSTAGS.get(tag_id, str(tag_id)), value)

            # PNG tEXt/iTXt chunks (e.g. Stable Diffusion "parameters")
            for key, value in getattr(img, "text", {}).items():
                if key == "XML:com.adobe.xmp":
                    continue
                tags.setdefault(key, _normalize(value))

            xmp = img.info.get("xmp") or img.info.get("XML:com.adobe.xmp")
            if xmp:
                self._add_xmp(tags, xmp)

        logger.debug("pillow: %d tags from %s", len(tags), path)
        return tags

    def _add(self, tags: dict[str, Any], name: str, value: Any) -> None:
        if name in XP_TAGS:
            tags[name] = _decode_xp(value)
        elif name == "UserComment" and isinstance(value, bytes):
            tags[name] = _decode_user_comment(value)
        else:
            tags[name] = _normalize(value)

    def _add_xmp(self, tags: dict[str, Any], xmp: bytes | str) -> None:
        packet = xmp.decode("utf-8", errors="replace") if isinstance(xmp, bytes) else xmp
        tags["XMP"] = packet
        match = PROVENANCE_RE.search(packet)
        if match:
            tags["XMPProvenance"] = match.group(1) or match.group(2)
