"""
Saturation Module

Maps an interleaved RGBA pixel buffer to a single-channel saturation buffer.
Hue and lightness are discarded so that coloured glyphs stand out from the
grey background noise regardless of their colour.
"""

import numpy as np
from typing import Union

from captcha_config import PipelineConfig
from .errors import ShapeError


BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]


def as_byte_array(data: BytesLike) -> np.ndarray:
    """Return *data* as a flat uint8 array without copying bytes objects."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)
    arr = np.asarray(data)
    if arr.dtype != np.uint8:
        if arr.size and not np.issubdtype(arr.dtype, np.integer):
            raise ShapeError(f"Pixel values must be integers, got dtype {arr.dtype}")
        if arr.size and (arr.min() < 0 or arr.max() > 255):
            raise ShapeError(f"Pixel values must fit in a byte, got range [{arr.min()}, {arr.max()}]")
        arr = arr.astype(np.uint8)
    return arr.ravel()


class SaturationTransform:
    """Computes per-pixel colour saturation."""

    def __init__(self, config: dict = None):
        """
        Initialize saturation transform.

        Args:
            config: Optional config dict, uses PipelineConfig.GEOMETRY if None
        """
        self.config = config or PipelineConfig.GEOMETRY
        self.channels = self.config['CHANNELS']

    def transform(self, pixels: BytesLike) -> np.ndarray:
        """
        Saturate an RGBA buffer.

        sat = (max(r,g,b) - min(r,g,b)) * 255 // max(r,g,b), with black
        pixels (max == 0) mapped to 0.

        Args:
            pixels: Interleaved R,G,B,A bytes, length 4*N

        Returns:
            uint8 array of length N
        """
        flat = as_byte_array(pixels)
        if flat.size % self.channels != 0:
            raise ShapeError(
                f"Pixel buffer length {flat.size} is not a multiple of {self.channels}"
            )

        rgb = flat.reshape(-1, self.channels)[:, :3].astype(np.int32)
        max_value = rgb.max(axis=1)
        min_value = rgb.min(axis=1)

        # Operands are non-negative, so floor division truncates toward zero
        divisor = np.where(max_value == 0, 1, max_value)
        sat = np.where(max_value == 0, 0, (max_value - min_value) * 255 // divisor)

        return np.clip(sat, 0, 255).astype(np.uint8)
