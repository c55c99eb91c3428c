class AnalysisError(Exception):
    """Base exception for failures of an analysis call."""


class TransientServiceError(AnalysisError):
    """The AI provider is rate limiting or temporarily unavailable; retry later."""


class PermanentServiceError(AnalysisError):
    """The AI provider rejected the request or returned an unusable response."""


class AnalysisValidationError(AnalysisError):
    """The parsed response does not match the shape expected for the stage."""
