"""Forensic detectors for AI-generated images.

Pixel detectors (run in this order after the metadata detector):
- spectral: 1D spectral roll-off
- noise: sensor noise profile
- prnu: PRNU fingerprint
- hessian: Hessian geometry integrity
- physics: lighting paradox
- bloom: neural bloom mapping
- diffusion: DIRE reconstruction residue
- compression: compression profiling
- watermark: identity verification
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from aiimg.models import DetectorResult

from .base import BaseDetector, PixelDetector
from .bloom import BloomDetector
from .compression import CompressionDetector
from .diffusion import DiffusionDetector
from .hessian import HessianDetector
from .lineage import LineageDetector
from .metadata import MetadataDetector
from .noise import NoiseDetector
from .physics import PhysicsDetector
from .prnu import PRNUDetector
from .spectral import SpectralDetector
from .watermark import WatermarkDetector

logger = logging.getLogger(__name__)

# Fixed scan order of the pixel detectors
PIXEL_DETECTORS: list[type[PixelDetector]] = [
    SpectralDetector,
    NoiseDetector,
    PRNUDetector,
    HessianDetector,
    PhysicsDetector,
    BloomDetector,
    DiffusionDetector,
    CompressionDetector,
    WatermarkDetector,
]


def get_pixel_detectors() -> list[PixelDetector]:
    """Get pixel detector instances in scan order."""
    return [detector_cls() for detector_cls in PIXEL_DETECTORS]


def safe_invoke(name: str, fn: Callable[[], DetectorResult]) -> DetectorResult:
    """Run a detector, turning any exception into a zero-score fault result.

    Args:
        name: Tool name used in the fault marker
        fn: Zero-argument callable producing the detector result

    Returns:
        The detector's result, or ``{score: 0, markers: ["Forensic Fault: <name>"]}``
    """
    try:
        return fn()
    except Exception:
        logger.exception("Tool failure [%s]", name)
        return DetectorResult.fault(name)


def get_detector_status() -> dict[str, bool]:
    """Get availability status of all detectors.

    Returns:
        Dict mapping detector names to availability status.
    """
    status = {MetadataDetector.name.value: MetadataDetector.is_available()}
    for detector_cls in PIXEL_DETECTORS:
        status[detector_cls.name.value] = detector_cls.is_available()
    return status


def print_detector_status() -> None:
    """Print detector availability status in scan order."""
    print("aiimg detector status:")
    print("-" * 40)

    for name, available in get_detector_status().items():
        icon = "✓" if available else "✗"
        print(f"  {icon} {name}")


__all__ = [
    "BaseDetector",
    "PixelDetector",
    "MetadataDetector",
    "SpectralDetector",
    "NoiseDetector",
    "PRNUDetector",
    "HessianDetector",
    "PhysicsDetector",
    "BloomDetector",
    "DiffusionDetector",
    "CompressionDetector",
    "WatermarkDetector",
    "LineageDetector",
    "PIXEL_DETECTORS",
    "get_pixel_detectors",
    "safe_invoke",
    "get_detector_status",
    "print_detector_status",
]
