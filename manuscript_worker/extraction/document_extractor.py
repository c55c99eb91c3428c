from pathlib import PurePath

from manuscript_worker.chunking.chunker import annotate_pages
from manuscript_worker.extraction.base import BaseTextExtractor
from manuscript_worker.extraction.exceptions import UnsupportedFormatError
from manuscript_worker.extraction.file_loader import FileLoader
from manuscript_worker.logging.logger import Log


class DocumentTextExtractor:
    """Turns a stored document into page-annotated text.

    The adapter is picked by file suffix. Output is a sequence of
    ``[Page N]`` blocks, the format the chunker splits on.
    """

    def __init__(
        self,
        loader: FileLoader,
        adapters: dict[str, BaseTextExtractor],
    ) -> None:
        self._loader = loader
        self._adapters = {suffix.lower(): adapter for suffix, adapter in adapters.items()}

    @property
    def supported_suffixes(self) -> tuple[str, ...]:
        return tuple(sorted(self._adapters))

    def extract(self, source_ref: str) -> str:
        """Raises:
        UnsupportedFormatError: if the suffix has no adapter.
        FileNotFoundError: if the file is missing.
        TextExtractionError: if the adapter fails.
        """
        adapter = self._adapter_for(source_ref)
        data = self._loader.load(source_ref)
        return self.extract_bytes(data, source_ref, adapter)

    def extract_bytes(
        self,
        data: bytes,
        filename: str,
        adapter: BaseTextExtractor | None = None,
    ) -> str:
        adapter = adapter or self._adapter_for(filename)
        pages = adapter.extract_pages(data)
        Log.debug(f"Extracted {len(pages)} pages from {filename}")
        return annotate_pages(pages)

    def _adapter_for(self, filename: str) -> BaseTextExtractor:
        suffix = PurePath(filename).suffix.lower()
        adapter = self._adapters.get(suffix)
        if adapter is None:
            raise UnsupportedFormatError(
                f"Unsupported file type '{suffix or filename}'. "
                f"Supported: {list(self.supported_suffixes)}"
            )
        return adapter
