"""
Error types raised by the CAPTCHA reading stages.

Every failure surfaces as one CaptchaError subclass; callers that do not care
about the kind can catch the base class.
"""


class CaptchaError(Exception):
    """Base class for all pipeline failures."""


class InputError(CaptchaError):
    """Source bytes could not be read (missing file, invalid base64)."""


class DecodeError(CaptchaError):
    """Bytes are not a decodable image."""


class ShapeError(CaptchaError):
    """Buffer length, image geometry or block bounds do not match the fixed layout."""


class ModelLoadError(CaptchaError):
    """The serialized model is missing or corrupt."""
