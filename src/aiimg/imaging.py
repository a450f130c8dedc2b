"""Pixel access for the forensic detectors.

A :class:`PixelSource` wraps a decoded RGBA bitmap. Detectors never touch the
bitmap directly: each one asks for a :class:`PixelSample` at its own working
resolution, optionally cropped to a region of the source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

# (left, top, right, bottom) in source pixel coordinates
Box = tuple[float, float, float, float]


@dataclass(frozen=True)
class PixelSample:
    """A resampled RGBA pixel block.

    Attributes:
        width: Sample width in pixels (>= 1)
        height: Sample height in pixels (>= 1)
        data: Read-only uint8 array of shape (height, width, 4)
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"sample dimensions must be positive, got {self.width}x{self.height}")
        if self.data.dtype != np.uint8 or self.data.shape != (self.height, self.width, 4):
            raise ValueError(
                f"sample data must be uint8 of shape {(self.height, self.width, 4)}, "
                f"got {self.data.dtype} {self.data.shape}"
            )
        self.data.flags.writeable = False

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def flat(self) -> np.ndarray:
        """Pixels in row-major order as an (N, 4) int32 array."""
        return self.data.reshape(-1, 4).astype(np.int32)

    @property
    def red(self) -> np.ndarray:
        """Red channel as a (height, width) int32 array."""
        return self.data[:, :, 0].astype(np.int32)

    @property
    def gray(self) -> np.ndarray:
        """Channel mean (R+G+B)/3 as a (height, width) float array."""
        rgb = self.data[:, :, :3].astype(np.float64)
        return rgb.sum(axis=2) / 3

    @property
    def luma(self) -> np.ndarray:
        """ITU-R BT.601 luma as a (height, width) float array."""
        rgb = self.data[:, :, :3].astype(np.float64)
        return rgb[:, :, 0] * 0.299 + rgb[:, :, 1] * 0.587 + rgb[:, :, 2] * 0.114


class PixelSource:
    """A decoded image that detectors sample from.

    Args:
        image: Pillow image; converted to RGBA
        origin: Where the image came from (path or URL), if known
    """

    def __init__(self, image: Image.Image, origin: str = "", format: str | None = None):
        if image.width < 1 or image.height < 1:
            raise ValueError("image has no pixels")
        self._image = image if image.mode == "RGBA" else image.convert("RGBA")
        self.origin = origin
        self.format = format or image.format

    @property
    def mime_type(self) -> str | None:
        """MIME type of the decoded file format, if known."""
        return Image.MIME.get(self.format) if self.format else None

    @classmethod
    def open(cls, path: str | Path) -> PixelSource:
        """Decode an image file, honouring its EXIF orientation."""
        with Image.open(path) as img:
            img.load()
            fmt = img.format
            img = ImageOps.exif_transpose(img)
            logger.debug("Decoded %s (%dx%d %s)", path, img.width, img.height, fmt)
            return cls(img.convert("RGBA"), origin=str(path), format=fmt)

    @classmethod
    def from_image(cls, image: Image.Image, origin: str = "") -> PixelSource:
        return cls(image, origin=origin)

    @classmethod
    def from_array(cls, array: np.ndarray, origin: str = "") -> PixelSource:
        """Build a source from an (H, W), (H, W, 3) or (H, W, 4) uint8 array."""
        return cls(Image.fromarray(np.asarray(array, dtype=np.uint8)), origin=origin)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def image(self) -> Image.Image:
        return self._image

    def sample(self, width: int, height: int, box: Box | None = None) -> PixelSample:
        """Resample the image (or a region of it) to ``width`` x ``height``.

        Regions that fall outside the image read as transparent black.
        """
        if width < 1 or height < 1:
            raise ValueError(f"sample dimensions must be positive, got {width}x{height}")

        if box is None:
            region = self._image
            resize_box = None
        elif self._inside(box) and not _is_native(box, width, height):
            region = self._image
            resize_box = box
        else:
            # Pillow pads out-of-bounds crops with zeros
            left, top, right, bottom = (int(round(v)) for v in box)
            region = self._image.crop((left, top, max(right, left + 1), max(bottom, top + 1)))
            resize_box = None

        if resize_box is None and region.size == (width, height):
            resized = region
        else:
            resized = region.resize((width, height), Image.Resampling.BILINEAR, box=resize_box)

        data = np.array(resized, dtype=np.uint8)
        return PixelSample(width=width, height=height, data=data)

    def crop(self, left: int, top: int, width: int, height: int) -> PixelSample:
        """Take a native-resolution crop without resampling."""
        return self.sample(width, height, box=(left, top, left + width, top + height))

    def _inside(self, box: Box) -> bool:
        left, top, right, bottom = box
        return (
            0 <= left < right <= self._image.width and 0 <= top < bottom <= self._image.height
        )

    def __repr__(self) -> str:
        return f"PixelSource({self.width}x{self.height}, origin={self.origin!r})"


def _is_native(box: Box, width: int, height: int) -> bool:
    """Check if a box is an integer-aligned region of exactly the sample size."""
    left, top, right, bottom = box
    aligned = all(float(v).is_integer() for v in box)
    return aligned and right - left == width and bottom - top == height
