import io

import pdfplumber

from manuscript_worker.extraction.base import BaseTextExtractor
from manuscript_worker.extraction.exceptions import TextExtractionError


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts page texts from PDF using pdfplumber."""

    def extract_pages(self, data: bytes) -> list[str]:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                return [(page.extract_text() or "").strip() for page in pdf.pages]
        except Exception as exc:
            raise TextExtractionError(f"pdfplumber extraction failed: {exc}") from exc
