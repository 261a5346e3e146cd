"""
Raster buffers and per-pixel transforms.
Handles image loading, channel conversion and the contrast/negation passes.
"""

import os
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

import cv2
import numpy as np

from pagewords.color import ClassificationParams

CHANNELS = 4
CONTRAST_STRENGTH = 3

Pixel = Tuple[int, int, int, int]


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


@dataclass(frozen=True, eq=False)
class RasterBuffer:
    """Read-only RGBA page image of shape (height, width, 4)."""

    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != CHANNELS:
            raise ValueError(f"Expected pixels of shape (h, w, {CHANNELS}), got {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {self.pixels.dtype}")
        if self.pixels.flags.writeable:
            object.__setattr__(self, 'pixels', _read_only(self.pixels))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview], width: int, height: int) -> 'RasterBuffer':
        """
        Wrap tightly packed RGBA bytes.

        Raises:
            ValueError: If the length is not width * height * 4
        """
        expected = width * height * CHANNELS
        if width < 0 or height < 0 or len(data) != expected:
            raise ValueError(
                f"Raster of {width} x {height} needs {expected} bytes, got {len(data)}"
            )
        array = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, CHANNELS)
        return cls(array)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'RasterBuffer':
        """
        Wrap an RGBA, RGB or grayscale uint8 array. RGB and gray get an
        opaque alpha channel.
        """
        if array.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {array.dtype}")
        if array.ndim == 2:
            array = np.dstack([array, array, array])
        if array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        elif array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Unexpected pixel array shape: {array.shape}")
        return cls(array)

    @classmethod
    def from_image(cls, image_path: str) -> 'RasterBuffer':
        """
        Load an image file as an RGBA raster.

        Raises:
            FileNotFoundError: If image file doesn't exist
            ValueError: If image cannot be loaded
        """
        if not os.path.exists(image_path):
            raise FileNotFoundError(image_path)

        image = cv2.imread(image_path, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise ValueError(f"Failed to load image from {image_path}")

        if image.dtype != np.uint8:
            image = cv2.convertScaleAbs(image, alpha=255.0 / np.iinfo(image.dtype).max)

        # OpenCV loads BGR(A)
        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.shape[2] == 3:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        elif image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            raise ValueError(f"Unexpected number of channels: {image.shape[2]}")
        return cls(rgba)

    def sub_pixels(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        """Read-only view of the rectangle (x, y, w, h)."""
        return self.pixels[y:y + h, x:x + w]

    def to_bgr(self) -> np.ndarray:
        """Copy in OpenCV channel order, alpha dropped."""
        return np.ascontiguousarray(self.pixels[..., [2, 1, 0]])

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()


def save_image(raster: RasterBuffer, output_path: str) -> None:
    """Save a raster as an image file (alpha is dropped)."""
    success = cv2.imwrite(output_path, raster.to_bgr())
    if not success:
        raise ValueError(f"Failed to save image to {output_path}")


# Per-pixel transforms, for callers that drive their own pixel loop.

def negate(r: int, g: int, b: int, a: int, params: Optional[ClassificationParams] = None) -> Pixel:
    """Invert the color channels, alpha unchanged."""
    return 255 - r, 255 - g, 255 - b, a


def _compress(c: int, hi: int, strength: float) -> int:
    scaled = (hi - c) * strength
    return int(min(255, max(0, round(255 - scaled))))


def compress_dynamic_range(r: int, g: int, b: int, a: int, params: ClassificationParams,
                           strength: float = CONTRAST_STRENGTH) -> Pixel:
    """
    Stretch the range so the background maps to white and the ink moves
    towards black. Only the background anchor enters the formula.
    """
    bg = params.background
    return (_compress(r, bg.r, strength),
            _compress(g, bg.g, strength),
            _compress(b, bg.b, strength),
            a)


# Vectorized equivalents, applied to whole (..., 4) arrays.

def negate_array(pixels: np.ndarray, params: Optional[ClassificationParams] = None) -> np.ndarray:
    out = pixels.copy()
    out[..., :3] = 255 - pixels[..., :3]
    return out


def compress_dynamic_range_array(pixels: np.ndarray, params: ClassificationParams,
                                 strength: float = CONTRAST_STRENGTH) -> np.ndarray:
    bg = params.background
    hi = np.array([bg.r, bg.g, bg.b], dtype=np.float64)
    scaled = (hi - pixels[..., :3].astype(np.float64)) * strength
    out = pixels.copy()
    out[..., :3] = np.clip(np.round(255 - scaled), 0, 255).astype(np.uint8)
    return out


PixelFunction = Callable[..., Pixel]

_VECTORIZED = {
    negate: negate_array,
    compress_dynamic_range: compress_dynamic_range_array,
}


def apply_pixel_transform(raster: RasterBuffer, fn: PixelFunction,
                          params: Optional[ClassificationParams] = None, **kwargs) -> RasterBuffer:
    """
    Apply a per-pixel function to every pixel and return a new raster.

    The built-in transforms run vectorized; any other function is called
    once per pixel as fn(r, g, b, a, params, **kwargs).

    Args:
        raster: Source raster, left untouched
        fn: Per-pixel function returning (r, g, b, a)
        params: Classification params passed through to fn

    Returns:
        Transformed raster
    """
    vectorized = _VECTORIZED.get(fn)
    if vectorized is not None:
        return RasterBuffer(vectorized(raster.pixels, params, **kwargs))

    out = np.empty_like(raster.pixels)
    for y in range(raster.height):
        for x in range(raster.width):
            r, g, b, a = (int(v) for v in raster.pixels[y, x])
            out[y, x] = fn(r, g, b, a, params, **kwargs)
    return RasterBuffer(out)
