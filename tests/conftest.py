"""Shared fixtures: a synthetic template model and CAPTCHA renderings it can read."""

from __future__ import annotations

import json
from pathlib import Path

import cv2
import numpy as np
import pytest

from captcha_config import PipelineConfig
from captcha_stages import BlockExtractor, ModelStore

GEOMETRY = PipelineConfig.GEOMETRY
NUM_FEATURES = PipelineConfig.MODEL['NUM_FEATURES']
NUM_CLASSES = PipelineConfig.MODEL['NUM_CLASSES']
BLOCK_SHAPE = (GEOMETRY['BLOCK']['HEIGHT'], GEOMETRY['BLOCK']['WIDTH'])

WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)


@pytest.fixture(scope="session")
def templates() -> np.ndarray:
    """One random 0/1 glyph per class, shape (NUM_CLASSES, 22, 24)."""
    rng = np.random.default_rng(20240611)
    return rng.integers(0, 2, size=(NUM_CLASSES,) + BLOCK_SHAPE, dtype=np.uint8)


@pytest.fixture(scope="session")
def template_weights(templates: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """+w where the glyph is set and -w elsewhere, so each glyph scores highest on its own class."""
    flat = templates.reshape(NUM_CLASSES, NUM_FEATURES).astype(np.float64)
    weights = 0.05 * (2.0 * flat.T - 1.0)
    biases = np.zeros(NUM_CLASSES)
    return weights, biases


@pytest.fixture(scope="session")
def template_store(template_weights) -> ModelStore:
    weights, biases = template_weights
    return ModelStore(weights, biases)


@pytest.fixture
def model_file(tmp_path: Path, template_weights) -> Path:
    weights, biases = template_weights
    path = tmp_path / "weights.json"
    path.write_text(json.dumps({"weights": weights.tolist(), "biases": biases.tolist()}))
    return path


def render_captcha(templates: np.ndarray, text: str) -> np.ndarray:
    """Paint each character's glyph in red on a white 200x40 RGBA canvas."""
    alphabet = PipelineConfig.ALPHABET
    image = np.empty((GEOMETRY['HEIGHT'], GEOMETRY['WIDTH'], 4), dtype=np.uint8)
    image[:, :] = WHITE

    extractor = BlockExtractor()
    for index, char in enumerate(text):
        y1, y2, x1, x2 = extractor.block_bounds(index)
        glyph = templates[alphabet.index(char)].astype(bool)
        region = image[y1:y2, x1:x2]
        region[glyph] = RED
        region[~glyph] = WHITE

    return image


def encode_png(rgba: np.ndarray) -> bytes:
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR))
    assert ok
    return buffer.tobytes()


def encode_jpeg(rgba: np.ndarray, quality: int = 95) -> bytes:
    params = [cv2.IMWRITE_JPEG_QUALITY, quality]
    # Full-resolution chroma where the OpenCV build supports choosing it
    if hasattr(cv2, "IMWRITE_JPEG_SAMPLING_FACTOR"):
        params += [cv2.IMWRITE_JPEG_SAMPLING_FACTOR, cv2.IMWRITE_JPEG_SAMPLING_FACTOR_444]
    ok, buffer = cv2.imencode(".jpg", cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR), params)
    assert ok
    return buffer.tobytes()


@pytest.fixture(scope="session")
def captcha_text() -> str:
    return "K7XH2B"


@pytest.fixture(scope="session")
def captcha_rgba(templates: np.ndarray, captcha_text: str) -> np.ndarray:
    return render_captcha(templates, captcha_text)


@pytest.fixture(scope="session")
def captcha_png(captcha_rgba: np.ndarray) -> bytes:
    return encode_png(captcha_rgba)


@pytest.fixture(scope="session")
def captcha_jpeg(captcha_rgba: np.ndarray) -> bytes:
    return encode_jpeg(captcha_rgba)
