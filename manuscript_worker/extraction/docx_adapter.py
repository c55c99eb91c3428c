import io

from docx import Document

from manuscript_worker.extraction.base import (
    DEFAULT_WORDS_PER_PAGE,
    BaseTextExtractor,
    paginate_words,
)
from manuscript_worker.extraction.exceptions import TextExtractionError


class DocxAdapter(BaseTextExtractor):
    """Extracts DOCX body text with python-docx and paginates it by word count.

    DOCX files carry no fixed pages, so pages are simulated.
    """

    def __init__(self, words_per_page: int = DEFAULT_WORDS_PER_PAGE) -> None:
        self._words_per_page = words_per_page

    def extract_pages(self, data: bytes) -> list[str]:
        try:
            document = Document(io.BytesIO(data))
        except Exception as exc:
            raise TextExtractionError(f"python-docx extraction failed: {exc}") from exc
        paragraphs = [p.text for p in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                paragraphs.append(" ".join(cell.text for cell in row.cells))
        return paginate_words("\n".join(paragraphs), self._words_per_page)
