"""
Segmentation Module

Reshapes the flat saturation buffer into the fixed image grid and cuts it into
one block per character slot. Characters sit on an alternating baseline, so
odd slots are shifted down relative to even ones.
"""

import numpy as np
from typing import List, Tuple

from captcha_config import PipelineConfig
from .errors import ShapeError
from .saturation import as_byte_array, BytesLike


class GridReshaper:
    """Reinterprets a saturation buffer as a HEIGHT x WIDTH grid."""

    def __init__(self, config: dict = None):
        self.config = config or PipelineConfig.GEOMETRY
        self.height = self.config['HEIGHT']
        self.width = self.config['WIDTH']

    def reshape(self, buffer: BytesLike) -> np.ndarray:
        """Row-major reshape: grid[row, col] == buffer[row * WIDTH + col]."""
        flat = as_byte_array(buffer)
        expected = self.height * self.width
        if flat.size != expected:
            raise ShapeError(
                f"Saturation buffer has {flat.size} values, expected {expected} "
                f"({self.width}x{self.height} image)"
            )
        return flat.reshape(self.height, self.width)


class BlockExtractor:
    """Slices the grid into fixed character blocks."""

    def __init__(self, config: dict = None):
        """
        Initialize block extractor.

        Args:
            config: Optional config dict, uses PipelineConfig.GEOMETRY if None
        """
        self.config = config or PipelineConfig.GEOMETRY
        self.num_blocks = self.config['NUM_BLOCKS']
        self.block_height = self.config['BLOCK']['HEIGHT']
        self.block_width = self.config['BLOCK']['WIDTH']
        self.pitch = self.config['PITCH']
        self.x_margin = self.config['X_MARGIN']
        self.y_offset = self.config['Y_OFFSET']
        self.baseline_shift = self.config['BASELINE_SHIFT']

    def block_bounds(self, index: int) -> Tuple[int, int, int, int]:
        """
        Compute the rectangle of one character slot.

        Args:
            index: Slot index, 0 is the leftmost character

        Returns:
            (y1, y2, x1, x2) half-open bounds
        """
        if not 0 <= index < self.num_blocks:
            raise ShapeError(f"Block index {index} out of range 0..{self.num_blocks - 1}")

        x1 = (index + 1) * self.pitch + self.x_margin
        y1 = self.y_offset + self.baseline_shift * (index % 2)
        return y1, y1 + self.block_height, x1, x1 + self.block_width

    def extract_block(self, grid: np.ndarray, index: int) -> np.ndarray:
        """Cut one block out of the grid, checking the rectangle fits."""
        y1, y2, x1, x2 = self.block_bounds(index)

        if grid.ndim != 2:
            raise ShapeError(f"Expected a 2-D grid, got {grid.ndim} dimensions")
        rows, cols = grid.shape
        if y2 > rows or x2 > cols:
            raise ShapeError(
                f"Block {index} spans rows [{y1}, {y2}) and columns [{x1}, {x2}), "
                f"outside the {rows}x{cols} grid"
            )

        return grid[y1:y2, x1:x2]

    def extract(self, grid: np.ndarray) -> List[np.ndarray]:
        """Extract all character blocks, left to right."""
        return [self.extract_block(grid, a) for a in range(self.num_blocks)]
