"""Tests for per-block mean thresholding."""

from __future__ import annotations

import numpy as np
import pytest

from captcha_stages import Binarizer, ShapeError


def test_threshold_is_floor_of_mean_with_strict_comparison() -> None:
    # 370 cells of 11 and 158 of 10: mean is 5650 / 528, just above 10.7
    block = np.full((22, 24), 10, dtype=np.uint8)
    block.flat[:370] = 11
    binarizer = Binarizer()

    assert binarizer.threshold(block) == 10

    binary = binarizer.binarize(block)
    assert binary.flat[0] == 1
    assert binary.flat[527] == 0
    assert int(binary.sum()) == 370


def test_cell_equal_to_threshold_is_zero() -> None:
    block = np.full((22, 24), 42, dtype=np.uint8)

    assert not Binarizer().binarize(block).any()


def test_threshold_is_local_to_each_block() -> None:
    dark = np.zeros((22, 24), dtype=np.uint8)
    dark[0, :4] = 3
    bright = dark.astype(np.int32) + 200
    binarizer = Binarizer()

    assert np.array_equal(binarizer.binarize(dark), binarizer.binarize(bright.astype(np.uint8)))


def test_output_is_binary_and_same_shape() -> None:
    rng = np.random.default_rng(3)
    block = rng.integers(0, 256, size=(22, 24), dtype=np.uint8)

    binary = Binarizer().binarize(block)

    assert binary.shape == (22, 24)
    assert set(np.unique(binary).tolist()) <= {0, 1}


def test_high_values_do_not_overflow_the_mean() -> None:
    block = np.full((22, 24), 255, dtype=np.uint8)
    block[0, 0] = 0
    binarizer = Binarizer()

    assert binarizer.threshold(block) == 254
    assert int(binarizer.binarize(block).sum()) == 527


def test_wrong_block_shape_is_rejected() -> None:
    with pytest.raises(ShapeError):
        Binarizer().binarize(np.zeros((24, 22), dtype=np.uint8))
