"""Compression profile detector."""

from __future__ import annotations

from typing import ClassVar

from aiimg.detectors.base import PixelDetector
from aiimg.imaging import PixelSample
from aiimg.models import DetectorName, DetectorResult

BLOCK = 8


class CompressionDetector(PixelDetector):
    """Tell JPEG 8x8 block seams apart from isolated ringing halos.

    Block artifacts are counted across every 8th row boundary. A halo is a
    sharp step (> 50) immediately followed by a flat run (< 5) in flattened
    pixel order.
    """

    name: ClassVar[DetectorName] = DetectorName.COMPRESSION
    tool_name: ClassVar[str] = "Compression Profile"
    sample_size: ClassVar[int] = 128

    def analyze(self, sample: PixelSample) -> DetectorResult:
        red = sample.red

        below = red[BLOCK::BLOCK]
        above = red[BLOCK - 1 :: BLOCK][: len(below)]
        block_artifacts = int((abs(below - above) > 15).sum())

        flat = red.ravel()
        step = abs(flat[1:-1] - flat[:-2])
        next_step = abs(flat[2:] - flat[1:-1])
        haloing = int(((step > 50) & (next_step < 5)).sum())

        ratio = haloing / (block_artifacts + 1)
        score = min(ratio * 50, 100)

        return DetectorResult(
            score=score,
            markers=[f"Compression Haloing: {ratio:.2f}"],
            payload={"block_artifacts": block_artifacts, "haloing": haloing, "ratio": ratio},
        )
