"""Exceptions raised by the training core."""


class CropYieldError(Exception):
    """Base class for all crop_yield errors."""


class ValidationError(CropYieldError, ValueError):
    """Input data cannot be trained on, split, or scored."""


class InvalidStateError(CropYieldError, RuntimeError):
    """Operation not allowed in the model's current lifecycle state."""


class UnsupportedAlgorithmError(CropYieldError, NotImplementedError):
    """No trainer exists for the requested algorithm."""


class EncodingError(CropYieldError, ValueError):
    """Categorical value outside its domain under strict encoding."""
