"""
Classifier Module

Single-layer linear classifier: flatten a binary block, apply the affine
transform held by the model store, normalize with softmax and pick the most
probable class.
"""

import logging
import numpy as np
from typing import Tuple

from captcha_config import PipelineConfig
from .errors import ShapeError
from .model_store import ModelStore


logger = logging.getLogger(__name__)


def softmax(logits: np.ndarray) -> np.ndarray:
    """exp(x) / sum(exp(x)), without subtracting the maximum first."""
    with np.errstate(over='ignore', invalid='ignore'):
        exps = np.exp(logits)
        return exps / np.sum(exps)


class LinearClassifier:
    """Maps binary character blocks to alphabet symbols."""

    def __init__(self, store: ModelStore = None, alphabet: str = None):
        """
        Initialize classifier.

        Args:
            store: Model weights, uses ModelStore.embedded() if None
            alphabet: Class-index to character mapping, uses PipelineConfig.ALPHABET if None
        """
        self.store = store if store is not None else ModelStore.embedded()
        self.alphabet = alphabet if alphabet is not None else PipelineConfig.ALPHABET

    def flatten(self, binary_block: np.ndarray) -> np.ndarray:
        """Row-major flatten to a feature vector."""
        features = np.asarray(binary_block).reshape(-1)
        if features.size != self.store.num_features:
            raise ShapeError(
                f"Block has {features.size} cells, model expects {self.store.num_features}"
            )
        return features

    def logits(self, binary_block: np.ndarray) -> np.ndarray:
        """bias[j] + sum_k x[k] * W[k, j]"""
        x = self.flatten(binary_block).astype(np.float64)
        return self.store.biases + x @ self.store.weights

    def probabilities(self, binary_block: np.ndarray) -> np.ndarray:
        return softmax(self.logits(binary_block))

    def predict_index(self, binary_block: np.ndarray) -> Tuple[int, float]:
        """
        Pick the most probable class.

        Ties resolve to the lowest index. When the unstabilized softmax
        overflows, the arg-max is taken over the logits, which share its
        ordering.

        Returns:
            (class_index, probability)
        """
        logits = self.logits(binary_block)
        probs = softmax(logits)

        if np.all(np.isfinite(probs)):
            index = int(np.argmax(probs))
        else:
            logger.warning("Softmax overflowed (max logit %.3g); using logit arg-max", float(np.max(logits)))
            index = int(np.argmax(logits))

        return index, float(probs[index])

    def symbol(self, index: int) -> str:
        if not 0 <= index < len(self.alphabet):
            raise ShapeError(
                f"Class {index} has no symbol in the {len(self.alphabet)}-character alphabet"
            )
        return self.alphabet[index]

    def classify_with_confidence(self, binary_block: np.ndarray) -> Tuple[str, float]:
        index, prob = self.predict_index(binary_block)
        return self.symbol(index), prob

    def classify(self, binary_block: np.ndarray) -> str:
        """Return the character for one binary block."""
        return self.classify_with_confidence(binary_block)[0]
