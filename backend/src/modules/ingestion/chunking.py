"""Fixed-size character chunking of page text."""

from typing import List, Sequence

from ..chunk.schemas import PageChunk


def chunk_text(text: str, chunk_size: int = 1500, overlap: int = 200, min_length: int = 50) -> List[str]:
    """Split ``text`` into overlapping character windows.

    A window of ``chunk_size`` characters starts every ``chunk_size - overlap``
    characters; the last one may be shorter. Windows whose stripped length is
    ``min_length`` characters or fewer are dropped.

    Raises:
        ValueError: If ``overlap`` is not smaller than ``chunk_size``.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap must be non-negative and smaller than chunk_size")

    step = chunk_size - overlap
    chunks = []
    for start in range(0, len(text), step):
        piece = text[start : start + chunk_size].strip()
        if len(piece) > min_length:
            chunks.append(piece)
    return chunks


def build_page_chunks(
    pages: Sequence[str],
    chunk_size: int = 1500,
    overlap: int = 200,
    min_length: int = 50,
) -> List[PageChunk]:
    """Chunk every page, numbering pages from 1 and chunks from 0 within each page."""
    page_chunks = []
    for page_number, page_text in enumerate(pages, start=1):
        for chunk_index, content in enumerate(chunk_text(page_text, chunk_size, overlap, min_length)):
            page_chunks.append(PageChunk(page_number=page_number, chunk_index=chunk_index, content=content))
    return page_chunks
