"""
Decoding Module

Turns the supported inputs (file path, base64 string, raw bytes) into an RGBA
pixel buffer using OpenCV.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from .errors import InputError, DecodeError


logger = logging.getLogger(__name__)


@dataclass
class DecodedImage:
    """Interleaved RGBA pixels with their geometry."""
    pixels: np.ndarray
    width: int
    height: int


class ImageDecoder:
    """Reads and decodes CAPTCHA images."""

    def read_file(self, path: Union[str, Path]) -> bytes:
        path = Path(path)
        try:
            return path.read_bytes()
        except OSError as e:
            raise InputError(f"Could not read {path}: {e}") from e

    def decode_base64(self, data: str) -> bytes:
        """Decode base64 text, accepting a data URI prefix."""
        if 'base64,' in data:
            data = data.split('base64,', 1)[-1]
        try:
            return base64.b64decode(data.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise InputError(f"Invalid base64 data: {e}") from e

    def decode(self, data: bytes) -> DecodedImage:
        """
        Decode image bytes.

        Args:
            data: Encoded image (JPEG or any other format OpenCV reads)

        Returns:
            DecodedImage with a flat R,G,B,A uint8 buffer
        """
        if not data:
            raise DecodeError("Image data is empty")

        np_array = np.frombuffer(data, dtype=np.uint8)
        try:
            image = cv2.imdecode(np_array, cv2.IMREAD_COLOR)
        except cv2.error as e:
            raise DecodeError(f"OpenCV could not decode image: {e}") from e
        if image is None:
            raise DecodeError(f"Data ({len(data)} bytes) is not a decodable image")

        height, width = image.shape[:2]
        rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        logger.debug("Decoded %dx%d image from %d bytes", width, height, len(data))

        return DecodedImage(pixels=rgba.reshape(-1), width=width, height=height)
