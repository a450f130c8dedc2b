"""PRNU (photo response non-uniformity) detector.

Physical sensors leave a static, cross-channel-correlated grain in every
frame. Generated pixels are either perfectly smooth or carry noise that does
not line up between channels.
"""

from __future__ import annotations

from typing import ClassVar

import numpy as np

from aiimg.detectors.base import PixelDetector
from aiimg.imaging import PixelSample
from aiimg.models import DetectorName, DetectorResult


def stride_pairs(sample: PixelSample) -> tuple[np.ndarray, np.ndarray]:
    """Return the (first, second) pixels of each non-overlapping neighbour pair.

    Pairs are (0, 1), (2, 3), ... in flattened order, stopping one pair short
    of the end of the buffer.
    """
    flat = sample.flat
    count = len(range(0, flat.shape[0] * 4 - 8, 8))
    first = np.arange(count) * 2
    return flat[first], flat[first + 1]


class PRNUDetector(PixelDetector):
    """Look for organic, channel-aligned sensor grain."""

    name: ClassVar[DetectorName] = DetectorName.PRNU
    tool_name: ClassVar[str] = "PRNU Fingerprint"
    sample_size: ClassVar[int] = 100

    def analyze(self, sample: PixelSample) -> DetectorResult:
        a, b = stride_pairs(sample)
        r_noise = abs(a[:, 0] - b[:, 0])
        g_noise = abs(a[:, 1] - b[:, 1])

        organic = int(((abs(r_noise - g_noise) < 3) & (r_noise > 2)).sum())
        uniform = int((r_noise == 0).sum())

        half = sample.pixel_count / 2
        grain_ratio = organic / half
        uniform_ratio = uniform / half

        if grain_ratio < 0.15 or uniform_ratio > 0.4:
            score = 90
        elif grain_ratio < 0.3:
            score = 50
        else:
            score = 0

        return DetectorResult(
            score=score,
            markers=[
                f"PRNU Fingerprint: {'NOT FOUND' if grain_ratio < 0.15 else 'ORGANIC'}",
                f"Uniformity Anomaly: {uniform_ratio * 100:.1f}%",
            ],
            payload={"grain_ratio": grain_ratio, "uniform_ratio": uniform_ratio},
        )
