"""Verdict and report models."""

from enum import Enum

from pydantic import BaseModel, Field

from .file import FileInfo
from .result import DetectorName, DetectorResult, ResultsMap


class Verdict(str, Enum):
    """Final categorical verdict of a scan."""

    PROCESSED_AI = "PROCESSED / AI GENERATED"
    ORIGINAL_RAW = "ORIGINAL / RAW"


class DetectorDisplay(BaseModel):
    """One row of the per-detector breakdown."""

    name: DetectorName
    label: str
    score: int
    markers: list[str] = Field(default_factory=list)

    @property
    def severity(self) -> str:
        """Bar severity: 'high' above 75, 'medium' above 40, else 'low'."""
        if self.score > 75:
            return "high"
        if self.score > 40:
            return "medium"
        return "low"


class HeatmapHint(BaseModel):
    """Rendering hints for a heatmap overlay; not part of the scoring."""

    intensity: float = 0.0
    bloom_hotspot: bool = False


class VerdictReport(BaseModel):
    """Aggregated verdict for a single scan."""

    ai_score: int
    edit_score: int
    verdict: Verdict
    description: str
    summary: str
    per_detector: list[DetectorDisplay] = Field(default_factory=list)

    is_identity_confirmed: bool = False
    has_c2pa_edit: bool = False
    # Watermark markers mention C2PA or SynthID
    identity_verified: bool = False

    heatmap: HeatmapHint = Field(default_factory=HeatmapHint)

    @property
    def total_score(self) -> int:
        """Combined generation and processing score."""
        return self.ai_score + self.edit_score

    @property
    def is_ai(self) -> bool:
        """Check if the verdict flags the image."""
        return self.verdict == Verdict.PROCESSED_AI


class ImageReport(BaseModel):
    """Complete analysis of one image file."""

    file_info: FileInfo
    results: ResultsMap
    verdict: VerdictReport

    # Experimental model signature, never part of the scoring
    lineage: DetectorResult | None = None

    @property
    def raw_data(self) -> dict:
        """Tags extracted by the metadata detector."""
        metadata = self.results.metadata
        return metadata.raw_data if metadata is not None else {}


class SequenceReport(BaseModel):
    """Temporal analysis of an ordered set of frames."""

    frames: list[str] = Field(default_factory=list)
    correlation: DetectorResult
    coherence: DetectorResult

    @property
    def score(self) -> int:
        """Highest of the two temporal scores."""
        return max(self.correlation.score, self.coherence.score)
