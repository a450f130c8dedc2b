"""Sensor noise profile detector."""

from __future__ import annotations

from typing import ClassVar

from aiimg.detectors.base import PixelDetector
from aiimg.imaging import PixelSample
from aiimg.models import DetectorName, DetectorResult

SMOOTH_THRESHOLD = 5


class NoiseDetector(PixelDetector):
    """Flag images that are too smooth ("plasticky") or carry artificial noise.

    Neighbouring pixels are compared in flattened row-major order, so the last
    pixel of a row is paired with the first pixel of the next.
    """

    name: ClassVar[DetectorName] = DetectorName.NOISE
    tool_name: ClassVar[str] = "Noise Pattern"
    sample_size: ClassVar[int] = 200

    def analyze(self, sample: PixelSample) -> DetectorResult:
        rgb = sample.flat[:, :3]
        diff = abs(rgb[1:] - rgb[:-1]).sum(axis=1)

        smooth = diff < SMOOTH_THRESHOLD
        smooth_ratio = int(smooth.sum()) / sample.pixel_count
        noise_variance = int(diff[~smooth].sum())

        score = 0.0
        if smooth_ratio > 0.7:
            score = (smooth_ratio - 0.7) * 300  # too smooth
        elif smooth_ratio < 0.2:
            score = (0.2 - smooth_ratio) * 200  # too noisy

        return DetectorResult(
            score=score,
            markers=[f"Smooth region ratio: {smooth_ratio:.3f}"],
            payload={"smooth_ratio": smooth_ratio, "noise_variance": noise_variance},
        )
