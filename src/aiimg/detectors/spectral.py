"""1D spectral roll-off detector.

Natural photographs follow a 1/f power spectrum: adjacent-pixel differences
concentrate in coarse structure and fall off towards fine detail. Diffusion
and GAN upsampling tend to keep too much energy at high frequencies, or leave
periodic spikes from checkerboard upsampling.
"""

from __future__ import annotations

from typing import ClassVar

import numpy as np

from aiimg.detectors.base import PixelDetector
from aiimg.imaging import PixelSample
from aiimg.models import DetectorName, DetectorResult

ROLL_OFF_THRESHOLD = 0.65
SPIKE_THRESHOLD = 60
DENSITY_THRESHOLD = 0.005


class SpectralDetector(PixelDetector):
    """Compare low- and high-frequency energy along sampled rows."""

    name: ClassVar[DetectorName] = DetectorName.SPECTRAL
    tool_name: ClassVar[str] = "Spectral Roll-off"
    sample_size: ClassVar[int] = 256

    def analyze(self, sample: PixelSample) -> DetectorResult:
        size = sample.width
        gray = sample.luma.astype(np.float32).astype(np.float64)

        # Every 4th row
        rows = gray[::4]
        power = np.abs(rows[:, :-1] - rows[:, 1:])
        x = np.arange(power.shape[1])

        low = power[:, x < size * 0.3].sum()
        high_band = power[:, x > size * 0.7]
        high = high_band.sum()
        discontinuities = int((high_band > SPIKE_THRESHOLD).sum())

        roll_off = high / (low + 1)
        density = discontinuities / (size * size / 4)

        score = 0.0
        markers = []
        if roll_off > ROLL_OFF_THRESHOLD:
            score += (roll_off - ROLL_OFF_THRESHOLD) * 500
            markers.append("Spectral Plateau: High-frequency energy persists (1/C vs 1/f)")
        if density > DENSITY_THRESHOLD:
            score += density * 10000
            markers.append("Frequency Spike: Non-stochastic periodic noise detected")

        return DetectorResult(
            score=score,
            markers=markers or ["Natural Spectral Roll-off (1/f)"],
            payload={"roll_off": float(roll_off), "density": float(density)},
        )
