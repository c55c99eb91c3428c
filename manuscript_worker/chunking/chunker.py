"""Page-aligned chunking of extracted manuscript text.

Extractors render every page as a ``[Page N]`` block. The chunker groups
those blocks into chunks of at most ``pages_per_chunk`` pages without ever
cutting through a page, so joining the chunk texts gives back the input.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

DEFAULT_PAGES_PER_CHUNK = 25

# Markers only count at the start of a line, in the form annotate_pages emits.
PAGE_MARKER_RE = re.compile(r"^\[Page (\d+)\]\n", re.MULTILINE)
_PAGE_SPLIT_RE = re.compile(r"(?=^\[Page \d+\]\n)", re.MULTILINE)


@dataclass(frozen=True)
class TextChunk:
    """A run of whole pages, in document order."""

    index: int
    page_range_label: str
    text: str


def annotate_pages(pages: Iterable[str]) -> str:
    """Render page texts as consecutive ``[Page N]`` blocks, numbered from 1."""
    return "".join(
        f"[Page {number}]\n{text}\n\n" for number, text in enumerate(pages, start=1)
    )


def split_pages(text: str) -> list[str]:
    """Split annotated text into page segments.

    Any text ahead of the first marker is kept with the first page. A text
    without markers is a single page. Blank text has no pages.
    """
    if not text.strip():
        return []
    pages = [piece for piece in _PAGE_SPLIT_RE.split(text) if piece]
    if len(pages) > 1 and not PAGE_MARKER_RE.match(pages[0]):
        pages = [pages[0] + pages[1], *pages[2:]]
    return pages


def count_pages(text: str) -> int:
    return len(split_pages(text))


def chunk_pages(
    text: str,
    pages_per_chunk: int = DEFAULT_PAGES_PER_CHUNK,
) -> list[TextChunk]:
    """Group the pages of *text* into chunks of at most *pages_per_chunk* pages.

    Raises:
        ValueError: if pages_per_chunk is smaller than 1.
    """
    if pages_per_chunk < 1:
        raise ValueError(f"pages_per_chunk must be >= 1, got {pages_per_chunk}")

    pages = split_pages(text)
    chunks: list[TextChunk] = []
    for index, start in enumerate(range(0, len(pages), pages_per_chunk)):
        group = pages[start:start + pages_per_chunk]
        first = _page_number(group[0], start + 1)
        last = _page_number(group[-1], start + len(group))
        chunks.append(
            TextChunk(
                index=index,
                page_range_label=_range_label(first, last),
                text="".join(group),
            )
        )
    return chunks


def _page_number(page: str, position: int) -> int:
    match = PAGE_MARKER_RE.match(page)
    return int(match.group(1)) if match else position


def _range_label(first: int, last: int) -> str:
    if first == last:
        return f"page {first}"
    return f"pages {first}-{last}"
