class TextExtractionError(Exception):
    """Raised when text cannot be extracted from a document."""


class UnsupportedFormatError(TextExtractionError):
    """Raised when no extractor handles the document's file type."""
