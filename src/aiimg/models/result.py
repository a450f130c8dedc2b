"""Detector result models."""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .file import FileInfo


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    """Round a raw score and clamp it to the 0-100 range.

    Raises:
        ValueError: If the score is NaN or infinite
    """
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"non-finite detector score: {value}")
    return max(0, min(100, round_half_up(value)))


class DetectorName(str, Enum):
    """The fixed set of forensic detectors that make up a scan."""

    METADATA = "metadata"
    SPECTRAL = "spectral"
    NOISE = "noise"
    PRNU = "prnu"
    HESSIAN = "hessian"
    PHYSICS = "physics"
    BLOOM = "bloom"
    DIFFUSION = "diffusion"
    COMPRESSION = "compression"
    WATERMARK = "watermark"

    @property
    def label(self) -> str:
        """Human-readable method name used in reports."""
        return DETECTOR_LABELS[self]


DETECTOR_LABELS = {
    DetectorName.METADATA: "Metadata Forensics",
    DetectorName.SPECTRAL: "1D Spectral Roll-off",
    DetectorName.HESSIAN: "Hessian Geometry Integrity",
    DetectorName.BLOOM: "Neural Bloom Mapping",
    DetectorName.NOISE: "Sensor Noise Profile",
    DetectorName.PRNU: "PRNU Fingerprinting",
    DetectorName.PHYSICS: "Lighting & Physics Paradox",
    DetectorName.DIFFUSION: "DIRE Reconstruction Residue",
    DetectorName.COMPRESSION: "Compression Profiling",
    DetectorName.WATERMARK: "Identity Verification",
}


class DetectorResult(BaseModel):
    """Output of a single detector.

    Attributes:
        score: Integer 0-100; raw floats are rounded half-up and clamped
        markers: Human-readable findings, never empty
        payload: Detector-specific extras (ratios, variances) not used in scoring
    """

    model_config = ConfigDict(frozen=True)

    score: int
    markers: list[str]
    payload: dict[str, Any] = Field(default_factory=dict)

    @field_validator("score", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return clamp_score(value)

    @field_validator("markers")
    @classmethod
    def _non_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("a detector result must carry at least one marker")
        return value

    @classmethod
    def fault(cls, name: str) -> "DetectorResult":
        """Result recorded for a detector that raised."""
        return cls(score=0, markers=[f"Forensic Fault: {name}"])

    @property
    def is_fault(self) -> bool:
        """Check if this result stands in for a failed detector."""
        return self.score == 0 and len(self.markers) == 1 and self.markers[0].startswith(
            "Forensic Fault: "
        )


class MetadataResult(DetectorResult):
    """Metadata detector output with the extracted tags and file details."""

    raw_data: dict[str, Any] = Field(default_factory=dict)
    file_info: FileInfo | None = None

    @property
    def has_c2pa_edit(self) -> bool:
        """Check if content credentials recorded an editing history."""
        return C2PA_EDIT_SIGNAL in self.markers


C2PA_EDIT_SIGNAL = "C2PA_EDIT_SIGNAL"


class ResultsMap(BaseModel):
    """Per-detector results of one scan, keyed by detector name.

    A detector that is missing from ``entries`` is absent: the aggregator
    leaves it out of its weighted averages instead of counting it as zero.
    """

    model_config = ConfigDict(frozen=True)

    entries: dict[DetectorName, MetadataResult | DetectorResult] = Field(default_factory=dict)

    def get(self, name: DetectorName | str) -> DetectorResult | None:
        """Get a detector's result, or None if it is absent."""
        return self.entries.get(DetectorName(name))

    def score(self, name: DetectorName | str) -> int | None:
        """Get a detector's score, or None if it is absent."""
        result = self.get(name)
        return result.score if result is not None else None

    def names(self) -> list[DetectorName]:
        """Names of detectors present, in insertion order."""
        return list(self.entries)

    def items(self) -> list[tuple[DetectorName, DetectorResult]]:
        """(name, result) pairs in insertion order."""
        return list(self.entries.items())

    @property
    def metadata(self) -> MetadataResult | None:
        """Return the metadata result when it carries tag data."""
        result = self.get(DetectorName.METADATA)
        return result if isinstance(result, MetadataResult) else None

    def __contains__(self, name: object) -> bool:
        try:
            return DetectorName(name) in self.entries
        except ValueError:
            return False

    def __getitem__(self, name: DetectorName | str) -> DetectorResult:
        return self.entries[DetectorName(name)]

    def __len__(self) -> int:
        return len(self.entries)
