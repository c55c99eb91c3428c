from abc import ABC, abstractmethod

DEFAULT_WORDS_PER_PAGE = 300


class BaseTextExtractor(ABC):
    """Contract for all document text extraction adapters."""

    @abstractmethod
    def extract_pages(self, data: bytes) -> list[str]:
        """Extract the text of every page from raw file content.

        Args:
            data: Raw file content.

        Returns:
            One string per page, in document order.

        Raises:
            TextExtractionError: if extraction fails for any reason.
        """


def paginate_words(text: str, words_per_page: int = DEFAULT_WORDS_PER_PAGE) -> list[str]:
    """Split flowing text into simulated pages of *words_per_page* words.

    Formats without real pages (DOCX, plain text) are paginated this way so
    that page references in the analysis still mean something. Empty pages
    are never produced.
    """
    if words_per_page < 1:
        raise ValueError(f"words_per_page must be >= 1, got {words_per_page}")
    words = text.split()
    return [
        " ".join(words[start:start + words_per_page])
        for start in range(0, len(words), words_per_page)
    ]
