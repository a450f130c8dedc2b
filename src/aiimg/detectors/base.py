"""Base detector classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from aiimg.models import DetectorName

if TYPE_CHECKING:
    from aiimg.imaging import PixelSample, PixelSource
    from aiimg.models import DetectorResult


class BaseDetector(ABC):
    """Abstract base class for forensic detectors.

    Attributes:
        name: Key of the detector in the results map (None if never scored)
        tool_name: Name reported in the fault marker when the detector raises
    """

    name: ClassVar[DetectorName | None] = None
    tool_name: ClassVar[str] = "base"

    @classmethod
    def is_available(cls) -> bool:
        """Check if this detector is available.

        Returns:
            True if all dependencies are installed
        """
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tool_name={self.tool_name!r})"


class PixelDetector(BaseDetector):
    """A detector that works on a single resampled view of the image.

    Subclasses should implement:
    - analyze(): Score one PixelSample

    Detectors that need several views (crops, corners) override detect().
    """

    sample_size: ClassVar[int] = 64

    def detect(self, source: PixelSource) -> DetectorResult:
        """Sample the source at ``sample_size`` and analyze it.

        Args:
            source: Decoded image to inspect

        Returns:
            DetectorResult with a 0-100 score and at least one marker
        """
        return self.analyze(source.sample(self.sample_size, self.sample_size))

    @abstractmethod
    def analyze(self, sample: PixelSample) -> DetectorResult:
        """Score a pixel sample."""
        pass
