"""Pytest configuration and fixtures."""

import subprocess

import numpy as np
import pytest
from PIL import Image

from aiimg.config import reset_config
from aiimg.imaging import PixelSource


def command_exists(cmd: str) -> bool:
    """Check if a command exists in PATH."""
    try:
        subprocess.run(
            [cmd, "-ver"],
            capture_output=True,
            timeout=5,
        )
        return True
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate each test from AIIMG_* variables and the cached config."""
    for key in [
        "AIIMG_METADATA_TIMEOUT",
        "AIIMG_ENABLE_LINEAGE",
        "AIIMG_SMARTPHONE_BRANDS",
        "AIIMG_AI_KEYWORDS",
        "AIIMG_USE_EXIFTOOL",
        "AIIMG_EXIFTOOL_TIMEOUT",
    ]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("aiimg.config.CONFIG_LOCATIONS", [])
    reset_config()
    yield
    reset_config()


@pytest.fixture
def has_exiftool() -> bool:
    """Check if exiftool is available."""
    return command_exists("exiftool")


@pytest.fixture
def white_array() -> np.ndarray:
    """All-white 64x64 RGB pixels."""
    return np.full((64, 64, 3), 255, dtype=np.uint8)


@pytest.fixture
def white_source(white_array) -> PixelSource:
    """All-white 64x64 image with no origin."""
    return PixelSource.from_array(white_array)


@pytest.fixture
def noisy_array() -> np.ndarray:
    """Uniform random 128x128 RGB pixels (fixed seed)."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(128, 128, 3), dtype=np.uint8)


@pytest.fixture
def image_file(tmp_path, white_array):
    """Write an image to disk and return its path.

    Call with an optional array, filename and Pillow save options.
    """

    def _write(array=None, name="photo.png", **save_options):
        path = tmp_path / name
        pixels = white_array if array is None else array
        Image.fromarray(np.asarray(pixels, dtype=np.uint8)).save(path, **save_options)
        return str(path)

    return _write
