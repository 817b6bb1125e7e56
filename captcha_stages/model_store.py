"""
Model Store Module

Holds the pretrained weight matrix and bias vector of the linear classifier.

The model is serialized as a JSON object with two fields:
    weights: NUM_FEATURES rows of NUM_CLASSES floats
    biases:  NUM_CLASSES floats

A store is immutable once built; its arrays are flagged read-only so a single
instance can be shared by any number of callers.
"""

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np

from captcha_config import PipelineConfig
from .errors import ModelLoadError


logger = logging.getLogger(__name__)

_EMBEDDED_CACHE: Dict[str, "ModelStore"] = {}


class ModelStore:
    """Read-only container for classifier weights and biases."""

    def __init__(self, weights, biases, config: dict = None):
        """
        Validate and freeze model arrays.

        Args:
            weights: Array-like of shape (NUM_FEATURES, NUM_CLASSES)
            biases: Array-like of shape (NUM_CLASSES,)
            config: Optional config dict, uses PipelineConfig.MODEL if None
        """
        self.config = config or PipelineConfig.MODEL
        num_features = self.config['NUM_FEATURES']
        num_classes = self.config['NUM_CLASSES']

        try:
            weights = np.array(weights, dtype=np.float64)
            biases = np.array(biases, dtype=np.float64)
        except (TypeError, ValueError, OverflowError) as e:
            raise ModelLoadError(f"Model arrays are not numeric matrices: {e}") from e

        if weights.shape != (num_features, num_classes):
            raise ModelLoadError(
                f"Weight matrix has shape {weights.shape}, expected ({num_features}, {num_classes})"
            )
        if biases.shape != (num_classes,):
            raise ModelLoadError(f"Bias vector has shape {biases.shape}, expected ({num_classes},)")
        if not (np.all(np.isfinite(weights)) and np.all(np.isfinite(biases))):
            raise ModelLoadError("Model contains non-finite values")

        weights.flags.writeable = False
        biases.flags.writeable = False
        self._weights = weights
        self._biases = biases

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def biases(self) -> np.ndarray:
        return self._biases

    @property
    def num_features(self) -> int:
        return self._weights.shape[0]

    @property
    def num_classes(self) -> int:
        return self._weights.shape[1]

    @classmethod
    def from_mapping(cls, data: dict, config: dict = None) -> "ModelStore":
        """Build a store from a decoded {'weights': ..., 'biases': ...} object."""
        if not isinstance(data, dict):
            raise ModelLoadError(f"Model blob must be an object, got {type(data).__name__}")
        missing = [key for key in ('weights', 'biases') if key not in data]
        if missing:
            raise ModelLoadError(f"Model blob is missing field(s): {', '.join(missing)}")
        return cls(data['weights'], data['biases'], config)

    @classmethod
    def from_json(cls, text: Union[str, bytes], config: dict = None) -> "ModelStore":
        """Parse a serialized model blob."""
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ModelLoadError(f"Model blob is not valid JSON: {e}") from e
        return cls.from_mapping(data, config)

    @classmethod
    def from_file(cls, path: Union[str, Path], config: dict = None) -> "ModelStore":
        """Load a model blob from disk."""
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ModelLoadError(f"Could not read model file {path}: {e}") from e
        logger.debug("Loading model from %s", path)
        return cls.from_json(text, config)

    @classmethod
    def embedded(cls, config: dict = None) -> "ModelStore":
        """
        Return the model packaged with the library.

        The CAPTCHA_MODEL_PATH environment variable, when set, points at a
        replacement blob. Stores are cached per source so every default
        classifier shares one instance.
        """
        config = config or PipelineConfig.MODEL
        override = os.environ.get(config['PATH_ENV_VAR'])
        source = override or f"{config['RESOURCE_PACKAGE']}:{config['RESOURCE_DIR']}/{config['RESOURCE_NAME']}"

        if source in _EMBEDDED_CACHE:
            return _EMBEDDED_CACHE[source]

        if override:
            store = cls.from_file(override, config)
        else:
            store = cls.from_json(_read_packaged_model(config), config)

        logger.info("Loaded model from %s (%d features, %d classes)",
                    source, store.num_features, store.num_classes)
        _EMBEDDED_CACHE[source] = store
        return store


def _read_packaged_model(config: dict) -> str:
    resource = (resources.files(config['RESOURCE_PACKAGE'])
                .joinpath(config['RESOURCE_DIR'])
                .joinpath(config['RESOURCE_NAME']))
    try:
        return resource.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError, ModuleNotFoundError) as e:
        raise ModelLoadError(
            f"Packaged model {config['RESOURCE_DIR']}/{config['RESOURCE_NAME']} is unavailable: {e}"
        ) from e


def clear_embedded_cache(source: Optional[str] = None) -> None:
    """Forget cached embedded stores (all of them, or one source)."""
    if source is None:
        _EMBEDDED_CACHE.clear()
    else:
        _EMBEDDED_CACHE.pop(source, None)
