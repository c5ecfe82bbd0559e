"""Error taxonomy for standard curve and titer analysis.

Every failure is deterministic in its inputs and recoverable at the call
boundary: hosts catch ``QPCRAnalysisError`` and show a guidance message.
"""


class QPCRAnalysisError(ValueError):
    """Base class for all analysis failures."""


class InvalidDataError(QPCRAnalysisError):
    """Standard curve dataset breaks a structural or value invariant."""


class DegenerateFitError(QPCRAnalysisError):
    """All log10(SQ) values are equal, so the slope is undefined."""


class UndefinedPredictionError(QPCRAnalysisError):
    """No usable fitted curve (missing, non-finite or zero slope)."""


class MissingInputError(QPCRAnalysisError):
    """A required scalar input was not provided."""


class InvalidParameterError(QPCRAnalysisError):
    """A required scalar input is non-positive, non-numeric or non-finite."""
