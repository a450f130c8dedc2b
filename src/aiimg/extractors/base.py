"""Base extractor class."""

import contextlib
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, ClassVar

# EXIF / ExifTool date formats
DATE_FORMATS = [
    "%Y:%m:%d %H:%M:%S%z",  # 2024:01:15 12:30:45+08:00
    "%Y:%m:%d %H:%M:%S",  # 2024:01:15 12:30:45
    "%Y-%m-%dT%H:%M:%S%z",  # ISO format with TZ
    "%Y-%m-%dT%H:%M:%S",  # ISO format
    "%Y:%m:%d %H:%M:%S.%f%z",  # With microseconds and TZ
    "%Y:%m:%d %H:%M:%S.%f",  # With microseconds
]


def parse_date(date_str: Any) -> datetime | None:
    """Parse the date formats found in EXIF and ExifTool output."""
    if not date_str:
        return None

    # Try known formats
    for fmt in DATE_FORMATS:
        with contextlib.suppress(ValueError):
            return datetime.strptime(str(date_str).strip(), fmt)

    # Fallback: try ISO format parsing
    with contextlib.suppress(ValueError, TypeError):
        return datetime.fromisoformat(str(date_str).replace("Z", "+00:00"))

    return None


class BaseExtractor(ABC):
    """Abstract base class for tag extractors.

    Extractors read the metadata embedded in an image file and return it as a
    flat ``{tag name: value}`` dictionary. They follow a plugin architecture
    where each extractor can check its own availability and gracefully skip
    if dependencies are not available.

    Attributes:
        name: Human-readable name of the extractor
        priority: Lower numbers run first (default: 100); on key clashes the
            earlier extractor wins
    """

    name: ClassVar[str] = "base"
    priority: ClassVar[int] = 100

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Check if this extractor is available.

        Returns:
            True if all dependencies are available
        """
        pass

    @abstractmethod
    def extract(self, path: str) -> dict[str, Any]:
        """Extract tags from an image file.

        Args:
            path: Path to the image file

        Returns:
            Flat dictionary of tag names to values (empty if nothing found)
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority})"
