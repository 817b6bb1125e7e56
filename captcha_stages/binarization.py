"""
Binarization Module

Thresholds a character block against its own mean intensity.
"""

import math

import numpy as np

from captcha_config import PipelineConfig
from .errors import ShapeError


class Binarizer:
    """Converts a block to a 0/1 matrix using a per-block mean threshold."""

    def __init__(self, config: dict = None):
        self.config = config or PipelineConfig.GEOMETRY
        self.shape = (self.config['BLOCK']['HEIGHT'], self.config['BLOCK']['WIDTH'])

    def threshold(self, block: np.ndarray) -> int:
        """floor of the block mean; the classifier weights were fit against this exact value."""
        mean = float(np.sum(block, dtype=np.int64)) / block.size
        return math.floor(mean)

    def binarize(self, block: np.ndarray) -> np.ndarray:
        """
        Binarize a block.

        Args:
            block: uint8 array of the configured block shape

        Returns:
            uint8 array of the same shape; 1 where the cell is strictly above
            floor(mean), else 0
        """
        block = np.asarray(block)
        if block.shape != self.shape:
            raise ShapeError(f"Block has shape {block.shape}, expected {self.shape}")

        return (block.astype(np.int32) > self.threshold(block)).astype(np.uint8)
