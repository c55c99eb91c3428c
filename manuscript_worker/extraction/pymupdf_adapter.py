import pymupdf

from manuscript_worker.extraction.base import BaseTextExtractor
from manuscript_worker.extraction.exceptions import TextExtractionError


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts page texts from PDF using PyMuPDF."""

    def extract_pages(self, data: bytes) -> list[str]:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return [page.get_text().strip() for page in doc]
        except Exception as exc:
            raise TextExtractionError(f"pymupdf extraction failed: {exc}") from exc
