"""
CAPTCHA Reading Stages

This package contains the components of the fixed-layout CAPTCHA reader:
- saturation: RGBA pixels to per-pixel colour saturation
- segmentation: Grid reshaping and fixed character-block extraction
- binarization: Per-block mean thresholding
- model_store: Read-only classifier weights and biases
- classifier: Affine transform, softmax and arg-max over the alphabet
- decoding: File / base64 / bytes input to RGBA pixels
"""

from .errors import CaptchaError, InputError, DecodeError, ShapeError, ModelLoadError
from .saturation import SaturationTransform
from .segmentation import GridReshaper, BlockExtractor
from .binarization import Binarizer
from .model_store import ModelStore
from .classifier import LinearClassifier
from .decoding import ImageDecoder, DecodedImage

__all__ = [
    'CaptchaError',
    'InputError',
    'DecodeError',
    'ShapeError',
    'ModelLoadError',
    'SaturationTransform',
    'GridReshaper',
    'BlockExtractor',
    'Binarizer',
    'ModelStore',
    'LinearClassifier',
    'ImageDecoder',
    'DecodedImage'
]
