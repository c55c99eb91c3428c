from pathlib import Path

from manuscript_worker.config.settings import Settings
from manuscript_worker.extraction.base import BaseTextExtractor
from manuscript_worker.extraction.document_extractor import DocumentTextExtractor
from manuscript_worker.extraction.docx_adapter import DocxAdapter
from manuscript_worker.extraction.file_loader import FileLoader
from manuscript_worker.extraction.pdfplumber_adapter import PdfPlumberAdapter
from manuscript_worker.extraction.plain_text_adapter import PlainTextAdapter
from manuscript_worker.extraction.pymupdf_adapter import PyMuPdfAdapter


class ExtractorFactory:
    """Creates the document text extractor based on settings."""

    PDF_ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create_pdf_adapter(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create(cls, settings: Settings) -> DocumentTextExtractor:
        words_per_page = settings.docx_words_per_page
        plain_text = PlainTextAdapter(words_per_page)
        return DocumentTextExtractor(
            loader=FileLoader(Path(settings.files_root)),
            adapters={
                ".pdf": cls.create_pdf_adapter(settings),
                ".docx": DocxAdapter(words_per_page),
                ".txt": plain_text,
                ".md": plain_text,
            },
        )
