"""Tests for pixel sampling."""

import numpy as np
import pytest

from aiimg.imaging import PixelSample, PixelSource


class TestPixelSample:
    """Test PixelSample validation and views."""

    def test_shape_validated(self):
        with pytest.raises(ValueError):
            PixelSample(width=2, height=2, data=np.zeros((3, 2, 4), dtype=np.uint8))
        with pytest.raises(ValueError):
            PixelSample(width=0, height=2, data=np.zeros((2, 0, 4), dtype=np.uint8))
        with pytest.raises(ValueError):
            PixelSample(width=2, height=2, data=np.zeros((2, 2, 4), dtype=np.float32))

    def test_read_only(self):
        sample = PixelSample(width=2, height=2, data=np.zeros((2, 2, 4), dtype=np.uint8))
        with pytest.raises(ValueError):
            sample.data[0, 0, 0] = 1

    def test_views(self):
        data = np.zeros((1, 2, 4), dtype=np.uint8)
        data[0, 0] = [30, 60, 90, 255]
        data[0, 1] = [255, 255, 255, 255]
        sample = PixelSample(width=2, height=1, data=data)

        assert sample.pixel_count == 2
        assert sample.flat.shape == (2, 4)
        assert sample.red.tolist() == [[30, 255]]
        assert sample.gray[0, 0] == pytest.approx(60.0)
        assert sample.luma[0, 1] == pytest.approx(255.0)


class TestPixelSource:
    """Test PixelSource decoding and resampling."""

    def test_from_array_gray(self):
        source = PixelSource.from_array(np.full((4, 6), 200, dtype=np.uint8))
        assert (source.width, source.height) == (6, 4)
        sample = source.sample(6, 4)
        assert sample.data[0, 0].tolist() == [200, 200, 200, 255]

    def test_sample_size(self, white_source):
        sample = white_source.sample(200, 100)
        assert (sample.width, sample.height) == (200, 100)
        assert sample.data.shape == (100, 200, 4)
        assert (sample.data[:, :, :3] == 255).all()

    def test_crop_pads_outside(self):
        source = PixelSource.from_array(np.full((10, 10, 3), 255, dtype=np.uint8))
        crop = source.crop(5, 5, 10, 10)
        assert crop.data.shape == (10, 10, 4)
        assert crop.data[0, 0].tolist() == [255, 255, 255, 255]
        assert crop.data[9, 9].tolist() == [0, 0, 0, 0]

    def test_crop_native(self):
        pixels = np.zeros((8, 8, 3), dtype=np.uint8)
        pixels[2, 3] = [10, 20, 30]
        crop = PixelSource.from_array(pixels).crop(3, 2, 2, 2)
        assert crop.data[0, 0, :3].tolist() == [10, 20, 30]

    def test_invalid_sample_size(self, white_source):
        with pytest.raises(ValueError):
            white_source.sample(0, 10)

    def test_open(self, image_file):
        path = image_file(name="white.png")
        source = PixelSource.open(path)
        assert (source.width, source.height) == (64, 64)
        assert source.mime_type == "image/png"
        assert source.origin == path
