"""Tests for verdict aggregation."""

import pytest

from aiimg.aggregate import (
    AI_WEIGHTS,
    DESCRIPTIONS,
    EDIT_WEIGHTS,
    aggregate,
    forensic_summary,
    mitigate,
    weighted_score,
)
from aiimg.models import (
    C2PA_EDIT_SIGNAL,
    DetectorName,
    DetectorResult,
    MetadataResult,
    ResultsMap,
    Verdict,
)


def make_results(tags=None, metadata_markers=None, markers=None, **scores) -> ResultsMap:
    """Build a results map from detector scores.

    ``metadata`` becomes a MetadataResult carrying ``tags``; ``markers`` maps
    detector names to marker lists.
    """
    markers = markers or {}
    entries = {}
    for name, score in scores.items():
        detector = DetectorName(name)
        if detector == DetectorName.METADATA:
            entries[detector] = MetadataResult(
                score=score,
                markers=metadata_markers or ["No metadata anomalies detected"],
                raw_data=tags or {},
            )
        else:
            entries[detector] = DetectorResult(score=score, markers=markers.get(name, ["x"]))
    return ResultsMap(entries=entries)


class TestWeightedScore:
    """Test the weighted averages."""

    def test_weights_sum(self):
        assert sum(AI_WEIGHTS.values()) == pytest.approx(24.5)
        assert sum(EDIT_WEIGHTS.values()) == pytest.approx(8.5)

    def test_empty_map(self):
        report = aggregate(ResultsMap())
        assert report.ai_score == 0
        assert report.edit_score == 0
        assert report.verdict == Verdict.ORIGINAL_RAW
        assert report.per_detector == []

    def test_absent_is_not_zero(self):
        """An absent detector leaves the denominator; a zero score stays in it."""
        assert weighted_score(make_results(noise=80), AI_WEIGHTS) == 80
        assert weighted_score(make_results(noise=80, metadata=0), AI_WEIGHTS) == 16

    def test_rounds_half_up(self):
        # (50 * 1.5 + 51 * 1.0) / 2.5 = 50.4, (51 * 1.5 + 50 * 1.0) / 2.5 = 50.6
        assert weighted_score(make_results(spectral=50, noise=51), AI_WEIGHTS) == 50
        assert weighted_score(make_results(spectral=51, noise=50), AI_WEIGHTS) == 51
        # 65 * 2.5 / (2.5 + 1.0) = 46.4
        assert weighted_score(make_results(noise=65, prnu=0), EDIT_WEIGHTS) == 46


class TestMitigation:
    """Test reality mitigation."""

    def test_each_rule(self):
        assert mitigate(50, make_results(hessian=19)) == 35
        assert mitigate(50, make_results(hessian=20)) == 50
        assert mitigate(50, make_results(prnu=10)) == 25
        assert mitigate(50, make_results(physics=0)) == 40

    def test_camera_identity(self):
        camera = {"Make": "Canon", "Model": "EOS R5", "Software": "Lightroom"}
        assert mitigate(50, make_results(tags=camera, metadata=0)) == 30

        ai_software = {"Make": "Canon", "Model": "EOS R5", "Software": "AI Upscaler"}
        assert mitigate(50, make_results(tags=ai_software, metadata=0)) == 50

        make_only = {"Make": "Canon"}
        assert mitigate(50, make_results(tags=make_only, metadata=0)) == 50

    def test_texture_safeguard(self):
        results = make_results(spectral=90, hessian=5)
        assert mitigate(100, results) == 100 - 15 - 30

    def test_absent_detectors_do_not_mitigate(self):
        assert mitigate(50, ResultsMap()) == 50

    def test_clamped_at_zero(self):
        assert mitigate(10, make_results(hessian=0, prnu=0, physics=0)) == 0


class TestVerdict:
    """Test verdict decision and description precedence."""

    def test_override_beats_mitigation(self):
        results = make_results(watermark=95, hessian=0, prnu=0, physics=0)
        report = aggregate(results)
        assert report.ai_score == 100
        assert report.verdict == Verdict.PROCESSED_AI

    def test_metadata_override(self):
        results = make_results(
            metadata=100,
            metadata_markers=['METADATA SMOKING GUN: Software contains "midjourney"'],
            tags={"Software": "Midjourney v6"},
            hessian=0,
            prnu=0,
            physics=0,
        )
        report = aggregate(results)
        assert report.ai_score == 100
        assert report.description == DESCRIPTIONS["ai"]
        assert not report.is_identity_confirmed

    def test_identity_skips_mitigation(self):
        results = make_results(watermark=91, bloom=0, hessian=0, prnu=0, physics=0)
        report = aggregate(results)
        # 91 * 4 / 15.5 = 23.48, unmitigated
        assert report.ai_score == 23
        assert report.is_identity_confirmed
        assert report.verdict == Verdict.PROCESSED_AI
        assert report.description == DESCRIPTIONS["identity"]

    def test_c2pa_edit(self):
        results = make_results(
            tags={"Make": "Canon", "Model": "R5"},
            metadata=0,
            metadata_markers=["C2PA: CRYPTOGRAPHIC EDIT RECORD FOUND", C2PA_EDIT_SIGNAL],
            hessian=0,
        )
        report = aggregate(results)
        assert report.has_c2pa_edit
        assert report.verdict == Verdict.PROCESSED_AI
        assert report.description == DESCRIPTIONS["c2pa_edit"]
        assert "C2PA Content Credentials indicate manual editing history." in report.summary

    def test_processed(self):
        report = aggregate(make_results(compression=100, prnu=40))
        assert report.ai_score == 40
        assert report.edit_score == 85
        assert report.description == DESCRIPTIONS["processed"]

    def test_combined(self):
        report = aggregate(make_results(prnu=30, compression=30))
        # ai 30, edit 30: total 60 with neither above 50
        assert report.verdict == Verdict.PROCESSED_AI
        assert report.description == (
            "Cumulative forensic signals detected (AI: 30% + Processing: 30%). "
            "Image shows mixed signs of manipulation or synthesis."
        )

    def test_identity_verified_badge(self):
        report = aggregate(
            make_results(watermark=85, markers={"watermark": ["Frequency Footprint: SynthID-like Artifacts"]})
        )
        assert report.identity_verified
        assert not aggregate(make_results(watermark=0)).identity_verified

    def test_per_detector_order(self):
        results = make_results(metadata=10, spectral=20, noise=30)
        report = aggregate(results)
        assert [row.name for row in report.per_detector] == [
            DetectorName.METADATA,
            DetectorName.SPECTRAL,
            DetectorName.NOISE,
        ]
        assert report.per_detector[1].label == "1D Spectral Roll-off"

    def test_total_score(self):
        report = aggregate(make_results(prnu=30, compression=30))
        assert report.total_score == 60
        assert report.is_ai


class TestScenarios:
    """End-to-end aggregation of representative detector outputs."""

    def test_flat_white_image(self):
        """All-white 64x64 image with no tags."""
        results = make_results(
            metadata=25,
            metadata_markers=["Anomalous: Striped EXIF/No Camera ID"],
            spectral=0,
            noise=90,
            prnu=90,
            hessian=0,
            physics=0,
            bloom=100,
            diffusion=85,
            compression=0,
            watermark=0,
        )
        report = aggregate(results)
        assert report.ai_score == 15
        assert report.edit_score == 37
        assert report.verdict == Verdict.PROCESSED_AI
        assert report.description.startswith("Cumulative forensic signals detected (AI: 15%")
        assert "Complete absence of sensor-level noise (PRNU)." in report.summary

    def test_camera_photo(self):
        """Canon body, Lightroom export, natural sensor noise."""
        results = make_results(
            tags={"Make": "Canon", "Model": "EOS R5", "Software": "Adobe Lightroom 12.0"},
            metadata=0,
            spectral=10,
            noise=10,
            prnu=10,
            hessian=5,
            physics=5,
            bloom=20,
            diffusion=0,
            compression=10,
            watermark=0,
            markers={"prnu": ["PRNU Fingerprint: ORGANIC", "Uniformity Anomaly: 1.0%"]},
        )
        report = aggregate(results)
        assert report.ai_score == 0
        assert report.edit_score == 10
        assert report.verdict == Verdict.ORIGINAL_RAW
        assert report.description == DESCRIPTIONS["raw"]
        assert report.summary.startswith(
            "This image is consistent with a real photograph captured by a physical sensor."
        )
        assert "'Organic' PRNU fingerprint" in report.summary


class TestSummary:
    """Test the templated forensic summary."""

    def test_specific_trace(self):
        results = make_results(
            metadata=100,
            metadata_markers=["Anomalous: Striped EXIF/No Camera ID", "Filename Identity: Midjourney Origin"],
            physics=60,
        )
        summary = forensic_summary(Verdict.PROCESSED_AI, results)
        assert summary.startswith("This image exhibits significant signs")
        assert "Lighting/Shadow vectors violate physical laws." in summary
        assert summary.endswith("Specific Trace: Filename Identity: Midjourney Origin")

    def test_no_findings(self):
        summary = forensic_summary(Verdict.PROCESSED_AI, make_results(noise=10))
        assert "Specific forensic indicators" not in summary

    def test_compression_note(self):
        summary = forensic_summary(Verdict.ORIGINAL_RAW, make_results(compression=60))
        assert "edited or compressed" in summary
