"""Tests for the scan orchestrator and analysis entry points."""

import asyncio
import time
import warnings

import numpy as np
import pytest

from aiimg.analyze import (
    ScanError,
    analyze_file,
    analyze_files,
    analyze_image,
    analyze_image_async,
    get_file_info,
    scan,
    scan_async,
)
from aiimg.config import AiimgConfig, DetectionConfig
from aiimg.detectors import NoiseDetector
from aiimg.imaging import PixelSource
from aiimg.models import DetectorName, Verdict

SCAN_ORDER = [
    DetectorName.METADATA,
    DetectorName.SPECTRAL,
    DetectorName.NOISE,
    DetectorName.PRNU,
    DetectorName.HESSIAN,
    DetectorName.PHYSICS,
    DetectorName.BLOOM,
    DetectorName.DIFFUSION,
    DetectorName.COMPRESSION,
    DetectorName.WATERMARK,
]


class TestScan:
    """Test the detector pipeline."""

    def test_all_detectors_present(self, white_source):
        results = scan(white_source, tags={})
        assert results.names() == SCAN_ORDER

    def test_flat_white_scores(self, white_source):
        results = scan(white_source, tags={})
        assert results.score("spectral") == 0
        assert results.score("noise") == 90
        assert results.score("prnu") == 90
        assert results.score("hessian") == 0
        assert results.score("physics") == 0
        assert results.score("bloom") == 100
        assert results.score("diffusion") == 85
        assert results.score("compression") == 0
        assert results.score("watermark") == 0
        assert results.score("metadata") == 25

    def test_detector_fault_isolated(self, white_source, monkeypatch):
        def broken(self, sample):
            raise RuntimeError("noise model crashed")

        monkeypatch.setattr(NoiseDetector, "analyze", broken)
        results = scan(white_source, tags={})

        assert len(results) == 10
        assert results["noise"].markers == ["Forensic Fault: Noise Pattern"]
        assert results["noise"].score == 0
        assert results.score("prnu") == 90

    def test_metadata_fault_isolated(self, white_source, monkeypatch):
        async def broken(self, *args, **kwargs):
            raise RuntimeError("detector crashed")

        monkeypatch.setattr("aiimg.detectors.metadata.MetadataDetector.detect", broken)
        results = scan(white_source, tags={})
        assert results["metadata"].markers == ["Forensic Fault: Metadata"]
        assert results.metadata is None

    def test_orchestration_failure(self, white_source, monkeypatch):
        def broken():
            raise RuntimeError("registry unavailable")

        monkeypatch.setattr("aiimg.analyze.get_pixel_detectors", broken)
        with pytest.raises(ScanError):
            scan(white_source, tags={})

    def test_cancellation(self, white_source):
        async def run():
            task = asyncio.create_task(scan_async(white_source, tags={}))
            await asyncio.sleep(0)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(run())

    def test_filename_from_origin(self, white_array):
        source = PixelSource.from_array(white_array, origin="/tmp/gemini_generated_image.png")
        results = scan(source, tags={})
        assert results.score("metadata") == 100
        assert "Filename Identity: Google Gemini Origin" in results["metadata"].markers

    def test_metadata_timeout_bounds_scan(self, white_source, monkeypatch):
        def hung(path):
            time.sleep(3)
            return {"Software": "Midjourney"}

        monkeypatch.setattr("aiimg.detectors.metadata.extract_tags", hung)
        config = AiimgConfig(detection=DetectionConfig(metadata_timeout_seconds=0.2))

        started = time.monotonic()
        results = scan(white_source, "x.png", config=config)
        assert time.monotonic() - started < 1.5
        assert results["metadata"].markers == ["Metadata scan timed out"]
        assert len(results) == 10

    def test_sync_scan_inside_event_loop(self, white_source):
        async def run():
            return scan(white_source, tags={})

        with pytest.raises(ScanError, match="scan_async"):
            asyncio.run(run())


class TestAnalyzeImage:
    """Test scan plus aggregation."""

    def test_flat_white_verdict(self, white_source):
        report = analyze_image(white_source, tags={})
        assert report.verdict.ai_score == 15
        assert report.verdict.edit_score == 37
        assert report.verdict.verdict == Verdict.PROCESSED_AI
        assert report.lineage is None

    def test_midjourney_tag(self, white_source):
        report = analyze_image(white_source, tags={"Software": "Midjourney v6"})
        assert report.results.score("metadata") == 100
        assert report.verdict.ai_score == 100
        assert report.verdict.verdict == Verdict.PROCESSED_AI
        assert not report.verdict.is_identity_confirmed

    def test_identity_filename(self, white_array):
        source = PixelSource.from_array(white_array, origin="gemini_generated_image.png")
        report = analyze_image(source, tags={})
        assert report.verdict.ai_score == 100
        assert report.verdict.is_identity_confirmed
        assert report.verdict.description.startswith("Identity Verified")

    def test_lineage_attached(self, white_source):
        report = analyze_image(white_source, tags={}, lineage=True)
        assert report.lineage is not None
        assert report.lineage.markers[0].startswith("Model Identity: ")
        assert "lineage" not in report.results

    def test_lineage_from_config(self, white_source):
        config = AiimgConfig(detection=DetectionConfig(enable_lineage=True))
        report = analyze_image(white_source, tags={}, config=config)
        assert report.lineage is not None

    def test_async_counterpart(self, white_source):
        report = asyncio.run(analyze_image_async(white_source, tags={}))
        assert report.verdict.ai_score == 15
        assert report.verdict.edit_score == 37
        assert report.verdict.verdict == Verdict.PROCESSED_AI

    def test_sync_analyze_inside_event_loop(self, white_source):
        async def run():
            return analyze_image(white_source, tags={})

        with pytest.raises(ScanError, match="analyze_image_async"):
            asyncio.run(run())


class TestAnalyzeFile:
    """Test file-based analysis."""

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            analyze_file("/nonexistent/image.jpg")

    def test_undecodable(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"not an image")
        with pytest.raises(ScanError):
            analyze_file(str(path))

    def test_png(self, image_file):
        path = image_file(name="white.png")
        report = analyze_file(path, tags={})
        assert report.file_info.filename == "white.png"
        assert report.file_info.mime_type == "image/png"
        assert (report.file_info.width, report.file_info.height) == (64, 64)
        assert report.file_info.size_bytes > 0
        assert report.verdict.verdict == Verdict.PROCESSED_AI

    def test_exif_camera(self, image_file, noisy_array):
        from PIL import Image

        exif = Image.Exif()
        exif[0x010F] = "Canon"
        exif[0x0110] = "EOS R5"
        exif[0x0131] = "Adobe Lightroom 12.0"
        path = image_file(noisy_array, name="IMG_0001.jpg", exif=exif, quality=95)

        report = analyze_file(path)
        assert report.raw_data["Make"] == "Canon"
        assert report.results.score("metadata") == 0
        assert report.file_info.mime_type == "image/jpeg"

    def test_get_file_info(self, image_file):
        path = image_file(name="white.png")
        info = get_file_info(path)
        assert info.filename == "white.png"
        assert info.extension == ".png"
        assert info.width == 0
        assert info.modified is not None

    def test_analyze_files_warns(self, image_file):
        path = image_file(name="ok.png")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            reports = analyze_files([path, "/nonexistent/missing.png"])
        assert len(reports) == 1
        assert any("missing.png" in str(w.message) for w in caught)


def test_scan_is_deterministic(noisy_array):
    source = PixelSource.from_array(noisy_array)
    first = scan(source, tags={})
    second = scan(source, tags={})
    assert [r.score for _, r in first.items()] == [r.score for _, r in second.items()]
    assert np.array_equal(source.sample(8, 8).data, source.sample(8, 8).data)
