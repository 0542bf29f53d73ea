"""Text chunking strategies."""

from __future__ import annotations

from bisect import bisect_right

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from knowledge_rag.ingestion.models import PAGE_STARTS_KEY

DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", " ", ""]



def build_splitter(chunk_size: int = 1000, chunk_overlap: int = 200) -> RecursiveCharacterTextSplitter:
    """Return the recursive splitter used for every ingestion path."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
    if not 0 <= chunk_overlap < chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be >= 0 and < chunk_size ({chunk_size})"
        )
    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=DEFAULT_SEPARATORS,
        add_start_index=True,
    )


def chunk_documents(
    documents: list[Document],
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[Document]:
    """Split *documents* into smaller chunks for embedding.

    Parameters
    ----------
    documents:
        Normalised documents produced by a loader or the scraper.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.

    Returns
    -------
    list[Document]
        Chunks in document order, then in-document order.  Each carries
        its parent's metadata plus ``document_index``, ``chunk_index`` and
        ``start_index``; PDF chunks also get the ``page`` they start on.
        A document made only of separators contributes no chunks.
    """
    splitter = build_splitter(chunk_size, chunk_overlap)

    chunks: list[Document] = []
    for doc_index, document in enumerate(documents):
        pieces = splitter.split_documents([document])
        page_starts = document.metadata.get(PAGE_STARTS_KEY)
        for chunk_index, piece in enumerate(pieces):
            piece.metadata["document_index"] = doc_index
            piece.metadata["chunk_index"] = chunk_index
            piece.metadata.pop(PAGE_STARTS_KEY, None)
            if page_starts:
                page = _page_at(page_starts, piece.metadata.get("start_index", 0))
                if page is not None:
                    piece.metadata["page"] = page
            chunks.append(piece)
    return chunks


def _page_at(page_starts: list[int], offset: int) -> int | None:
    """1-based page holding *offset*, given each page's start offset."""
    page = bisect_right(page_starts, offset)
    return page or None
