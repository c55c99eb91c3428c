from manuscript_worker.extraction.base import (
    DEFAULT_WORDS_PER_PAGE,
    BaseTextExtractor,
    paginate_words,
)


class PlainTextAdapter(BaseTextExtractor):
    """Reads UTF-8 text (.txt, .md) and paginates it by word count."""

    def __init__(self, words_per_page: int = DEFAULT_WORDS_PER_PAGE) -> None:
        self._words_per_page = words_per_page

    def extract_pages(self, data: bytes) -> list[str]:
        text = data.decode("utf-8", errors="replace")
        return paginate_words(text, self._words_per_page)
