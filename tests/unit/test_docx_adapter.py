import pytest

from manuscript_worker.extraction.docx_adapter import DocxAdapter
from manuscript_worker.extraction.exceptions import TextExtractionError


class TestDocxAdapter:
    def test_extracts_paragraphs_and_tables(self, sample_docx_bytes: bytes) -> None:
        pages = DocxAdapter().extract_pages(sample_docx_bytes)
        assert pages == ["Introduction to the study Methods and materials Cell A Cell B"]

    def test_paginates_by_word_count(self, sample_docx_bytes: bytes) -> None:
        pages = DocxAdapter(words_per_page=4).extract_pages(sample_docx_bytes)
        assert pages[0] == "Introduction to the study"
        assert len(pages) == 3

    def test_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(TextExtractionError, match="python-docx"):
            DocxAdapter().extract_pages(b"not a docx")
