"""ExifTool metadata extractor for XMP, EXIF, IPTC."""

import json
import logging
import shutil
import subprocess
from typing import Any, ClassVar

from aiimg.config import get_config
from aiimg.extractors.base import BaseExtractor

logger = logging.getLogger(__name__)

# Groups describing the file on disk rather than its embedded metadata
SKIPPED_GROUPS = {"ExifTool", "File", "System", "Composite"}


class ExifToolExtractor(BaseExtractor):
    """Extract metadata using ExifTool.

    ExifTool reads far more than Pillow does, including:
    - XMP: CreatorTool, Credit, DigitalSourceType, dcterms provenance
    - IPTC: Keywords, Copyright, AI fields (2025.1)
    - MakerNotes and vendor-specific blocks

    Tags are flattened to their short names (``XMP:CreatorTool`` becomes
    ``CreatorTool``); the first group to provide a name wins.

    Install: brew install exiftool (macOS) or apt install libimage-exiftool-perl (Linux)
    """

    name: ClassVar[str] = "exiftool"
    priority: ClassVar[int] = 15  # After Pillow (10), before C2PA (20)

    @classmethod
    def is_available(cls) -> bool:
        """Check if exiftool is available and enabled."""
        return get_config().extraction.use_exiftool and shutil.which("exiftool") is not None

    def extract(self, path: str) -> dict[str, Any]:
        """Extract metadata using exiftool."""
        return self.flatten(self._run_exiftool(path))

    def _run_exiftool(self, path: str) -> dict[str, Any]:
        """Run exiftool and return JSON output."""
        try:
            cmd = [
                "exiftool",
                "-json",
                "-G",  # Show family 0 group names
                "-s",  # Short tag names
                path,
            ]
            timeout = get_config().extraction.exiftool_timeout_seconds
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
            if result.returncode == 0 and result.stdout:
                data = json.loads(result.stdout)
                if data and isinstance(data, list):
                    return data[0]  # ExifTool returns a list
        except (subprocess.TimeoutExpired, json.JSONDecodeError, FileNotFoundError) as e:
            logger.debug("exiftool failed on %s: %s", path, e)
        return {}

    @staticmethod
    def flatten(data: dict[str, Any]) -> dict[str, Any]:
        """Drop group prefixes and file-system groups from ExifTool output."""
        tags: dict[str, Any] = {}
        for key, value in data.items():
            group, _, name = key.rpartition(":")
            if not group or group in SKIPPED_GROUPS:
                continue
            tags.setdefault(name, value)
        return tags
