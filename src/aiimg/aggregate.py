"""Verdict aggregation.

Turns a :class:`ResultsMap` into a :class:`VerdictReport`:

1. Two weighted averages over the detectors that are present: Generation
   Probability (``ai_score``) and Processing Intensity (``edit_score``).
2. Reality mitigation: strong organic signals lower ``ai_score``, unless the
   image's identity is already confirmed.
3. Override: a watermark or metadata score of 95+ forces ``ai_score`` to 100.
4. Verdict decision and description.
5. Templated forensic summary.

The aggregator is a pure function and never raises on a well-formed map.
"""

from __future__ import annotations

import logging

from aiimg.models import (
    C2PA_EDIT_SIGNAL,
    DetectorDisplay,
    DetectorName,
    HeatmapHint,
    ResultsMap,
    Verdict,
    VerdictReport,
    round_half_up,
)

logger = logging.getLogger(__name__)

AI_WEIGHTS: dict[DetectorName, float] = {
    DetectorName.METADATA: 4.0,  # Identity markers & software tags
    DetectorName.WATERMARK: 4.0,  # Visual signatures (Gemini/DALL-E)
    DetectorName.BLOOM: 3.5,
    DetectorName.HESSIAN: 3.0,
    DetectorName.PHYSICS: 2.5,
    DetectorName.PRNU: 2.5,
    DetectorName.DIFFUSION: 2.5,
    DetectorName.SPECTRAL: 1.5,
    DetectorName.NOISE: 1.0,
}

EDIT_WEIGHTS: dict[DetectorName, float] = {
    DetectorName.COMPRESSION: 3.0,
    DetectorName.NOISE: 2.5,  # Denoising or added grain
    DetectorName.SPECTRAL: 2.0,  # Sharpening/upscaling
    DetectorName.PRNU: 1.0,
}

# Mitigation amounts
CAMERA_BONUS = 20
GEOMETRY_BONUS = 15
SENSOR_NOISE_BONUS = 25
PHYSICS_BONUS = 10
TEXTURE_SAFEGUARD = 30

OVERRIDE_THRESHOLD = 95

DESCRIPTIONS = {
    "identity": "Identity Verified: Filename or Watermark confirms specific AI model origin.",
    "ai": (
        "High probability of generative AI. "
        "Image violates physics or contains generative watermarks."
    ),
    "c2pa_edit": (
        "Content Credentials confirm this is a valid photograph that has been manually edited."
    ),
    "processed": (
        "Underlying geometry is physical, but significant post-processing "
        "(filters, compression, or upscaling) was detected."
    ),
    "combined": (
        "Cumulative forensic signals detected (AI: {ai}% + Processing: {edit}%). "
        "Image shows mixed signs of manipulation or synthesis."
    ),
    "raw": (
        "Consistent with organic capture mechanics and natural sensor noise. "
        "No generative or editing signatures found."
    ),
}


def weighted_score(results: ResultsMap, weights: dict[DetectorName, float]) -> int:
    """Weighted average of present detector scores as a 0-100 integer.

    Absent detectors are left out of the denominator; a map with none of the
    weighted detectors scores 0.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for name, weight in weights.items():
        result = results.get(name)
        if result is None:
            continue
        weighted_sum += result.score / 100 * weight
        total_weight += weight
    if total_weight <= 0:
        return 0
    return round_half_up(weighted_sum / total_weight * 100)


def is_identity_confirmed(results: ResultsMap) -> bool:
    """Watermark above 90 or a filename identity match."""
    watermark = results.get(DetectorName.WATERMARK)
    if watermark is not None and watermark.score > 90:
        return True
    metadata = results.get(DetectorName.METADATA)
    return metadata is not None and any("Filename Identity" in m for m in metadata.markers)


def has_c2pa_edit(results: ResultsMap) -> bool:
    metadata = results.get(DetectorName.METADATA)
    return metadata is not None and C2PA_EDIT_SIGNAL in metadata.markers


def _below(results: ResultsMap, name: DetectorName, threshold: int) -> bool:
    score = results.score(name)
    return score is not None and score < threshold


def _above(results: ResultsMap, name: DetectorName, threshold: int) -> bool:
    score = results.score(name)
    return score is not None and score > threshold


def mitigate(ai_score: int, results: ResultsMap) -> int:
    """Apply the reality-mitigation rules and clamp at 0."""
    tags = results.metadata.raw_data if results.metadata is not None else {}
    if tags.get("Make") and tags.get("Model"):
        software = str(tags.get("Software") or "").lower()
        if "ai" not in software and "generated" not in software:
            ai_score -= CAMERA_BONUS

    if _below(results, DetectorName.HESSIAN, 20):
        ai_score -= GEOMETRY_BONUS
    if _below(results, DetectorName.PRNU, 20):
        ai_score -= SENSOR_NOISE_BONUS
    if _below(results, DetectorName.PHYSICS, 20):
        ai_score -= PHYSICS_BONUS

    # Rough but physical surfaces (gravel, fabric) read as a spectral plateau
    if _above(results, DetectorName.SPECTRAL, 80) and _below(results, DetectorName.HESSIAN, 20):
        logger.debug("Texture safeguard triggered (high frequency + physical geometry)")
        ai_score -= TEXTURE_SAFEGUARD

    return max(0, ai_score)


def forensic_summary(verdict: Verdict, results: ResultsMap) -> str:
    """Build the human-readable summary paragraph for a verdict."""
    metadata = results.get(DetectorName.METADATA)
    metadata_markers = metadata.markers if metadata is not None else []

    if verdict == Verdict.PROCESSED_AI:
        summary = (
            "This image exhibits significant signs of digital manipulation or "
            "generative synthesis. "
        )
        findings = []
        if _above(results, DetectorName.WATERMARK, 50):
            findings.append("Visual watermark or digital signature detected.")
        if has_c2pa_edit(results):
            findings.append("C2PA Content Credentials indicate manual editing history.")
        if _above(results, DetectorName.PHYSICS, 50):
            findings.append("Lighting/Shadow vectors violate physical laws.")
        if _above(results, DetectorName.SPECTRAL, 80):
            findings.append(
                "High-frequency spectral plateau detected (typical of diffusion models)."
            )
        if _above(results, DetectorName.PRNU, 80):
            findings.append("Complete absence of sensor-level noise (PRNU).")
        if _above(results, DetectorName.HESSIAN, 80):
            findings.append(
                "Geometric structure lacks physical edge definition ('Mushy' geometry)."
            )

        identity = next(
            (
                m
                for m in metadata_markers
                if "Identity" in m or "AI" in m or "SMOKING GUN" in m
            ),
            None,
        )
        if identity:
            findings.append(f"Specific Trace: {identity}")

        if findings:
            summary += "Specific forensic indicators found: " + " ".join(findings)
        return summary

    summary = "This image is consistent with a real photograph captured by a physical sensor. "
    prnu = results.get(DetectorName.PRNU)
    if prnu is not None and any("ORGANIC" in m for m in prnu.markers):
        summary += (
            "The 'Organic' PRNU fingerprint confirms the presence of sensor-level noise, "
            "which is extremely difficult to synthesize. "
        )
    file_info = results.metadata.file_info if results.metadata is not None else None
    if file_info is not None and file_info.is_smartphone:
        summary += (
            "Metadata identifies a smartphone camera. 'AI' tags likely refer to built-in "
            "scene optimization, not generation. "
        )
    if _above(results, DetectorName.COMPRESSION, 50):
        summary += (
            "High post-processing scores indicate the image was edited or compressed "
            "(e.g., JPEG artifacts), but the underlying geometry remains physical. "
        )
    return summary


def aggregate(results: ResultsMap) -> VerdictReport:
    """Compute the verdict report for a completed scan.

    Args:
        results: Detector results keyed by detector name

    Returns:
        VerdictReport with both scores, verdict, description and summary
    """
    ai_score = weighted_score(results, AI_WEIGHTS)
    edit_score = weighted_score(results, EDIT_WEIGHTS)

    identity_confirmed = is_identity_confirmed(results)
    if not identity_confirmed:
        ai_score = mitigate(ai_score, results)
    ai_score = max(0, ai_score)

    # Deterministic proof outranks statistical mitigation
    if _at_least(results, DetectorName.WATERMARK, OVERRIDE_THRESHOLD) or _at_least(
        results, DetectorName.METADATA, OVERRIDE_THRESHOLD
    ):
        ai_score = 100

    c2pa_edit = has_c2pa_edit(results)
    has_ai_signals = ai_score > 50 or identity_confirmed
    total_score = ai_score + edit_score

    if has_ai_signals or c2pa_edit or total_score > 50:
        verdict = Verdict.PROCESSED_AI
        if has_ai_signals:
            description = DESCRIPTIONS["identity" if identity_confirmed else "ai"]
        elif c2pa_edit:
            description = DESCRIPTIONS["c2pa_edit"]
        elif edit_score > 50:
            description = DESCRIPTIONS["processed"]
        else:
            description = DESCRIPTIONS["combined"].format(ai=ai_score, edit=edit_score)
    else:
        verdict = Verdict.ORIGINAL_RAW
        description = DESCRIPTIONS["raw"]

    watermark = results.get(DetectorName.WATERMARK)
    identity_verified = watermark is not None and any(
        "C2PA" in m or "SynthID" in m for m in watermark.markers
    )

    logger.debug(
        "Verdict %s (ai=%d, edit=%d, identity=%s)",
        verdict.value,
        ai_score,
        edit_score,
        identity_confirmed,
    )

    return VerdictReport(
        ai_score=ai_score,
        edit_score=edit_score,
        verdict=verdict,
        description=description,
        summary=forensic_summary(verdict, results),
        per_detector=[
            DetectorDisplay(name=name, label=name.label, score=result.score, markers=result.markers)
            for name, result in results.items()
        ],
        is_identity_confirmed=identity_confirmed,
        has_c2pa_edit=c2pa_edit,
        identity_verified=identity_verified,
        heatmap=heatmap_hint(results),
    )


def heatmap_hint(results: ResultsMap) -> HeatmapHint:
    """Overlay intensity from spectral + hessian, hotspot flag from bloom."""
    spectral = results.score(DetectorName.SPECTRAL) or 0
    hessian = results.score(DetectorName.HESSIAN) or 0
    return HeatmapHint(
        intensity=(spectral + hessian) / 200,
        bloom_hotspot=_above(results, DetectorName.BLOOM, 50),
    )


def _at_least(results: ResultsMap, name: DetectorName, threshold: int) -> bool:
    score = results.score(name)
    return score is not None and score >= threshold
