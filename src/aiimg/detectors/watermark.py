"""Watermark and identity detector.

Scans for overt and covert generation signals:

- Google Gemini "sparkle" icon in the bottom-right corner
- Content credentials referenced by the image origin
- Visible corner logotypes and the DALL-E colour bar
- LSB parity patterns resembling SynthID-style frequency watermarks

The score is the maximum of the sub-checks; each sub-check that fires adds
its own marker.
"""

from __future__ import annotations

from typing import ClassVar

import numpy as np

from aiimg.detectors.base import PixelDetector
from aiimg.detectors.prnu import stride_pairs
from aiimg.imaging import PixelSample, PixelSource
from aiimg.models import DetectorName, DetectorResult, round_half_up

SPARKLE_SIZE = 60
C2PA_ORIGIN_HINTS = ("c2pa", "content-credentials")

# (x, y, w, h) as fractions of the image size
LOGO_CORNERS = [
    (0.85, 0.85, 0.15, 0.15),
    (0.05, 0.85, 0.15, 0.15),
]


def sparkle_score(source: PixelSource) -> int:
    """Look for the small white Gemini sparkle on a darker backdrop.

    A solid white corner would light up all 3600 pixels; the sparkle is thin,
    so only a narrow band of bright pixel counts qualifies.

    On images smaller than the crop, the padding reads as transparent black
    and counts as dark backdrop, so a small bright icon (a 20x20 white square,
    say) scores 100.
    """
    crop = source.crop(
        source.width - SPARKLE_SIZE, source.height - SPARKLE_SIZE, SPARKLE_SIZE, SPARKLE_SIZE
    ).flat[:, :3]
    bright = int((crop > 240).all(axis=1).sum())
    dark = int((crop < 100).all(axis=1).sum())
    if 30 < bright < 600 and dark > 10:
        return 100
    return 0


def colour_bar_buckets(source: PixelSource) -> int:
    """Count distinct saturated colour buckets in the bottom-right strip."""
    w, h = source.width, source.height
    strip = source.sample(50, 10, box=(w * 0.9, h * 0.95, w, h)).flat[::10, :3]
    saturated = strip[(strip.max(axis=1) - strip.min(axis=1)) > 50]
    buckets = np.floor(saturated / 50 + 0.5).astype(int)
    return len({tuple(b) for b in buckets.tolist()})


def logo_certainty(sample: PixelSample) -> float:
    """Certainty that a corner holds a high-saturation or pure-tone logo."""
    rgb = sample.flat[:, :3]
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    saturation = int(((rgb.max(axis=1) - rgb.min(axis=1)) > 100).sum())
    purity = int(
        ((abs(r - g) < 5) & (abs(g - b) < 5) & ((r > 200) | (r < 50))).sum()
    )
    if saturation > 400 and purity > 200:
        return saturation / 2500 * 80 + purity / 2500 * 40
    return 0.0


def visible_watermark_score(source: PixelSource) -> float:
    """Score visible watermarks: the DALL-E colour bar, then corner logos."""
    if colour_bar_buckets(source) >= 6:
        return 100.0

    w, h = source.width, source.height
    certainty = 0.0
    for x, y, cw, ch in LOGO_CORNERS:
        box = (w * x, h * y, w * x + w * cw, h * y + h * ch)
        certainty = max(certainty, logo_certainty(source.sample(50, 50, box=box)))
    return min(certainty, 100.0)


def frequency_pattern(sample: PixelSample) -> tuple[int, int]:
    """Return (significant, matching) counts for the LSB parity check.

    Only pairs with local variation count: a flat wall or sky has nowhere to
    hide an encoded pattern.
    """
    a, b = stride_pairs(sample)
    ra, rb = a[:, 0], b[:, 0]
    significant = abs(ra - rb) > 5
    matching = significant & (ra % 2 == rb % 2)
    return int(significant.sum()), int(matching.sum())


class WatermarkDetector(PixelDetector):
    """Composite identity check over several views of the image."""

    name: ClassVar[DetectorName] = DetectorName.WATERMARK
    tool_name: ClassVar[str] = "Identity Check"
    sample_size: ClassVar[int] = 32

    def detect(self, source: PixelSource) -> DetectorResult:
        markers = []
        score = 0.0

        sparkle = sparkle_score(source)
        if sparkle > 80:
            markers.append("GEMINI AI: VISIBLE SPARKLE WATERMARK DETECTED")
            score = max(score, sparkle)

        if any(hint in source.origin for hint in C2PA_ORIGIN_HINTS):
            markers.append("C2PA Content Manifest Found")
            score = 100

        visible = visible_watermark_score(source)
        if visible > 40:
            markers.append(f"Overt Watermark Signature: {round_half_up(visible)}% Certainty")
            score = max(score, visible)

        result = self.analyze(source.sample(self.sample_size, self.sample_size))
        if result.score:
            markers.extend(result.markers)
            score = max(score, result.score)

        return DetectorResult(
            score=score,
            markers=markers or ["No digital watermarks detected"],
            payload={"sparkle": sparkle, "visible": visible, **result.payload},
        )

    def analyze(self, sample: PixelSample) -> DetectorResult:
        """Run the frequency-pattern sub-check on its own."""
        significant, matching = frequency_pattern(sample)
        if significant > 100 and matching / significant > 0.85:
            return DetectorResult(
                score=85,
                markers=["Frequency Footprint: SynthID-like Artifacts"],
                payload={"significant": significant, "pattern_match": matching},
            )
        return DetectorResult(
            score=0,
            markers=["No digital watermarks detected"],
            payload={"significant": significant, "pattern_match": matching},
        )
