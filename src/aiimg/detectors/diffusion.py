"""DIRE (diffusion reconstruction error) residue detector.

A diffusion model reconstructs its own output with little error, which shows
up as a high-frequency residue that is either too uniform or too erratic
compared to natural sensor and scene noise.
"""

from __future__ import annotations

import math
from typing import ClassVar

from aiimg.detectors.base import PixelDetector
from aiimg.imaging import PixelSample
from aiimg.models import DetectorName, DetectorResult


class DiffusionDetector(PixelDetector):
    """Variance of the 4-neighbour Laplacian residue on the red channel."""

    name: ClassVar[DetectorName] = DetectorName.DIFFUSION
    tool_name: ClassVar[str] = "DIRE Residue"
    sample_size: ClassVar[int] = 64

    def analyze(self, sample: PixelSample) -> DetectorResult:
        red = sample.red
        residue = abs(
            red[1:-1, 1:-1] * 4 - red[:-2, 1:-1] - red[2:, 1:-1] - red[1:-1, :-2] - red[1:-1, 2:]
        )
        if residue.size == 0:
            return DetectorResult(score=0, markers=["DIRE: Insufficient High-Freq Data"])

        variance = float(residue.var())

        if math.isnan(variance):
            score = 0
        elif variance < 15 or variance > 250:
            score = 85  # too perfect or too erratic
        elif variance < 40:
            score = 40
        else:
            score = 0

        return DetectorResult(
            score=score,
            markers=[
                f"Residue Variance: {variance:.1f}",
                f"Pattern Prediction: {'AI FOOTPRINT' if variance < 25 else 'ORGANIC'}",
            ],
            payload={"variance": variance},
        )
