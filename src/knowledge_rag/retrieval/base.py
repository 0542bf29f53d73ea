"""Abstract base class for vector-store backends.

The ingestion service and the answering layer only talk to
:class:`VectorStoreBase`; Qdrant is the production backend and tests
plug in in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from langchain_core.documents import Document

    from knowledge_rag.deadline import Deadline


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the single shared collection.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def ensure_collection(self) -> None:
        """Open the collection, creating it empty when absent.  Idempotent."""
        ...

    @abstractmethod
    def add_documents(self, chunks: list[Document], *, deadline: Deadline | None = None) -> int:
        """Embed and write *chunks*; return how many were written.

        Implementations raise
        :class:`~knowledge_rag.errors.IngestionFailedError` carrying the
        partial count when any write fails.
        """
        ...

    @abstractmethod
    def similarity_search_by_text(
        self,
        query: str,
        *,
        k: int = 5,
        score_threshold: float | None = None,
    ) -> list[dict[str, Any]]:
        """Return the top-*k* results for *query*, most similar first.

        Each result dict contains:

        * ``"id"`` – point identifier
        * ``"content"`` – the chunk text
        * ``"score"`` – similarity score (higher = more similar)
        * ``"metadata"`` – the chunk's metadata dict

        An empty collection yields an empty list, never an error.
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Drop every stored record and leave an empty collection behind."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def count(self) -> int | None:
        """Number of stored records, or ``None`` when the backend can't tell."""
        return None
