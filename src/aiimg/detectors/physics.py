"""Lighting paradox detector.

In a real scene, shading gradients in a neighbourhood agree on where the light
comes from. Generated images often contain nearby gradients that point in
opposite directions with no geometric cause.
"""

from __future__ import annotations

import math
from typing import ClassVar

import numpy as np

from aiimg.detectors.base import PixelDetector
from aiimg.imaging import PixelSample
from aiimg.models import DetectorName, DetectorResult

EDGE_THRESHOLD = 60
VECTOR_SPACING = 10


class PhysicsDetector(PixelDetector):
    """Count opposite-pointing gradient vectors on the red channel."""

    name: ClassVar[DetectorName] = DetectorName.PHYSICS
    tool_name: ClassVar[str] = "Lighting Paradox"
    sample_size: ClassVar[int] = 64

    def analyze(self, sample: PixelSample) -> DetectorResult:
        red = sample.red.ravel()
        width = sample.width

        # Every 4th pixel, skipping the first and last rows
        idx = np.arange(width + 1, width * (sample.height - 1), 4)
        gx = red[idx + 1] - red[idx - 1]
        gy = red[idx + width] - red[idx - width]
        strong = (abs(gx) + abs(gy)) > EDGE_THRESHOLD
        vectors = np.arctan2(gy[strong], gx[strong])

        starts = np.arange(0, len(vectors) - VECTOR_SPACING, VECTOR_SPACING)
        diff = abs(vectors[starts] - vectors[starts + VECTOR_SPACING])
        paradoxes = int(((diff > math.pi * 0.7) & (diff < math.pi * 1.3)).sum())

        score = min(paradoxes / 20 * 100, 100)

        return DetectorResult(
            score=score,
            markers=[
                f"Lighting Paradoxes: {paradoxes}",
                f"Vector Consistency: {'FAIL' if paradoxes > 5 else 'PASS'}",
            ],
            payload={"vectors": len(vectors), "paradoxes": paradoxes},
        )
