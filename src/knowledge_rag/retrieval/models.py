"""Domain models for retrieval results and citation tracking."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Provenance record linking a retrieved chunk back to its source.

    Attributes
    ----------
    document_id:
        The vector-store point ID of the chunk (``None`` when unknown).
    source:
        File name, URL, or ``"direct-input"``.
    chunk_index:
        Ordinal position of the chunk within its parent document.
    page:
        Page number for PDF sources.
    score:
        Cosine similarity returned by the vector store.
    metadata:
        Full metadata stored with the chunk.
    retrieved_at:
        UTC timestamp of the search.
    """

    document_id: str | None = None
    source: str = "unknown"
    chunk_index: int | None = None
    page: int | None = None
    score: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    retrieved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def label(self) -> str:
        """``source`` with ``, page N`` appended when the page is known."""
        if self.page is not None:
            return f"{self.source}, page {self.page}"
        return self.source


class RetrievalResult(BaseModel):
    """A single retrieved chunk together with its citation."""

    content: str
    citation: Citation

    def __str__(self) -> str:  # noqa: D105
        return f"[{self.citation.label()}] {self.content[:120]}…"
