"""Tag extractors for aiimg."""

import logging
from typing import Any

from aiimg.extractors.base import BaseExtractor, parse_date
from aiimg.extractors.c2pa import C2PAExtractor
from aiimg.extractors.exiftool import ExifToolExtractor
from aiimg.extractors.pillow import PillowExtractor

logger = logging.getLogger(__name__)

# All extractor classes (order doesn't matter, priority is used)
_EXTRACTORS: list[type[BaseExtractor]] = [
    PillowExtractor,
    ExifToolExtractor,
    C2PAExtractor,
]


def get_available_extractors() -> list[BaseExtractor]:
    """Get list of available extractor instances, sorted by priority.

    Returns:
        List of extractor instances that are available on this system,
        sorted by priority (lowest first).
    """
    available = []
    for extractor_cls in _EXTRACTORS:
        try:
            if extractor_cls.is_available():
                available.append(extractor_cls())
        except Exception as e:
            # Skip extractors that fail to initialize
            logger.debug("Skipping extractor %s: %s", extractor_cls.name, e)

    # Sort by priority (lower = higher priority)
    available.sort(key=lambda x: x.priority)
    return available


def extract_tags(path: str) -> dict[str, Any]:
    """Run every available extractor and merge their tags.

    Extractors run in priority order; when two report the same tag name the
    earlier one wins. A failing extractor is skipped.

    Args:
        path: Path to the image file

    Returns:
        Flat dictionary of tag names to values
    """
    tags: dict[str, Any] = {}
    for extractor in get_available_extractors():
        try:
            found = extractor.extract(path)
        except Exception as e:
            logger.debug("%s extraction failed for %s: %s", extractor.name, path, e)
            continue
        for name, value in found.items():
            tags.setdefault(name, value)
    return tags


def get_extractor_status() -> dict[str, bool]:
    """Get availability status of all extractors.

    Returns:
        Dict mapping extractor names to availability status.
    """
    status = {}
    for extractor_cls in _EXTRACTORS:
        try:
            status[extractor_cls.name] = extractor_cls.is_available()
        except Exception:
            status[extractor_cls.name] = False
    return status


def print_extractor_status() -> None:
    """Print extractor availability status."""
    status = get_extractor_status()

    print("aiimg extractor status:")
    print("-" * 40)

    for name, available in sorted(status.items()):
        icon = "✓" if available else "✗"
        print(f"  {icon} {name}")


__all__ = [
    # Base class
    "BaseExtractor",
    # Extractors
    "PillowExtractor",
    "ExifToolExtractor",
    "C2PAExtractor",
    # Functions
    "extract_tags",
    "get_available_extractors",
    "get_extractor_status",
    "print_extractor_status",
    "parse_date",
]
