"""Error taxonomy for speaker model matching.

Expected "no decision" outcomes (likelihood gate, undefined divergence) are
not exceptions: the matcher reports them as ``None``. Everything here is
raised for conditions the caller has to deal with.
"""


class DiarizeError(Exception):
    """Base class for all errors raised by this package."""


class ModelMissing(DiarizeError):
    """A speaker has no mixture attached."""


class DimensionMismatch(DiarizeError):
    """Components of differing dimension, or vectors of unequal length compared."""


class UndefinedDivergence(DiarizeError):
    """A divergence was required but one of the operand models is missing or empty."""


class NormalizationFailure(DiarizeError):
    """The divergence to the UBM is undefined or non-positive, so D-MAP cannot be applied."""


class ModelNotFound(DiarizeError):
    """A model resource does not exist."""


class ModelFormatError(DiarizeError):
    """A model resource exists but cannot be decoded into a mixture."""


class UBMUnavailable(DiarizeError):
    """The universal background model could not be loaded."""


class ToolkitUnavailable(DiarizeError):
    """The native modeling toolkit requested by configuration cannot be imported."""


class SegmentationFormatError(DiarizeError):
    """A segmentation file line cannot be parsed."""
