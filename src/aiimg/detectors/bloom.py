"""Neural bloom detector."""

from __future__ import annotations

from typing import ClassVar

import numpy as np

from aiimg.detectors.base import PixelDetector
from aiimg.imaging import PixelSample
from aiimg.models import DetectorName, DetectorResult

PATCH = 8


class BloomDetector(PixelDetector):
    """Detect discretized texture: highly active patches next to dead flat ones.

    Natural texture varies stochastically from patch to patch; procedural
    layer activations jump abruptly.
    """

    name: ClassVar[DetectorName] = DetectorName.BLOOM
    tool_name: ClassVar[str] = "Neural Bloom"
    sample_size: ClassVar[int] = 64

    def analyze(self, sample: PixelSample) -> DetectorResult:
        variances = patch_variances(sample)

        ratios = variances[1:] / (variances[:-1] + 0.1)
        clusters = int(((ratios > 15) | (ratios < 0.05)).sum())
        score = min(clusters / len(variances) * 400, 100)

        level = "HIGH (Procedural Construction)" if score > 50 else "LOW (Stochastic Grain)"
        return DetectorResult(
            score=score,
            markers=[
                f"Activation Clusters: {clusters} detected",
                f"Neural Bloom: {level}",
            ],
            payload={"patches": len(variances), "clusters": clusters},
        )


def patch_variances(sample: PixelSample) -> np.ndarray:
    """Population variance of (R+G+B)/3 for each 8x8 patch, row-major.

    Samples smaller than one patch are treated as a single patch.
    """
    gray = sample.gray
    if sample.height < PATCH or sample.width < PATCH:
        return gray.reshape(1, -1).var(axis=1)
    rows, cols = sample.height // PATCH, sample.width // PATCH
    gray = gray[: rows * PATCH, : cols * PATCH]
    patches = gray.reshape(rows, PATCH, cols, PATCH).swapaxes(1, 2).reshape(-1, PATCH * PATCH)
    return patches.var(axis=1)
