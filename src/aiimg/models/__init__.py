"""Pydantic models for aiimg."""

from .file import FileInfo, format_size
from .report import (
    DetectorDisplay,
    HeatmapHint,
    ImageReport,
    SequenceReport,
    Verdict,
    VerdictReport,
)
from .result import (
    C2PA_EDIT_SIGNAL,
    DETECTOR_LABELS,
    DetectorName,
    DetectorResult,
    MetadataResult,
    ResultsMap,
    clamp_score,
    round_half_up,
)

__all__ = [
    # Main model
    "ImageReport",
    "SequenceReport",
    # Results
    "DetectorName",
    "DetectorResult",
    "MetadataResult",
    "ResultsMap",
    "DETECTOR_LABELS",
    "C2PA_EDIT_SIGNAL",
    "clamp_score",
    "round_half_up",
    # Verdict
    "Verdict",
    "VerdictReport",
    "DetectorDisplay",
    "HeatmapHint",
    # File
    "FileInfo",
    "format_size",
]
