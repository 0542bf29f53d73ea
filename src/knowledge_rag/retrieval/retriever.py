"""Semantic retriever: ranked search with citation tracking.

Usage::

    from knowledge_rag.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever(store, default_k=5)
    for r in retriever.search("What color is the sky?"):
        print(r.citation.label(), r.content[:80])
"""

from __future__ import annotations

import logging
from typing import Any

from knowledge_rag.retrieval.base import VectorStoreBase
from knowledge_rag.retrieval.models import Citation, RetrievalResult

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever that wraps any :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.
    default_k:
        Default number of results returned by :meth:`search`.
    score_threshold:
        Minimum similarity score forwarded to the backend; ``None``
        leaves relevance filtering to the backend's own defaults.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        *,
        default_k: int = 5,
        score_threshold: float | None = None,
    ) -> None:
        self._store = store
        self.default_k = default_k
        self.score_threshold = score_threshold

    def search(self, query: str, *, k: int | None = None) -> list[RetrievalResult]:
        """Run a semantic search and return results in rank order.

        An empty list means nothing relevant is stored; it is not an error.
        """
        k = self.default_k if k is None else k
        raw_hits = self._store.similarity_search_by_text(
            query, k=k, score_threshold=self.score_threshold
        )
        results = self._to_results(raw_hits)
        logger.info("Found %d relevant chunks for query %r", len(results), query)
        return results

    # -- internals ------------------------------------------------------------

    def _to_results(self, raw_hits: list[dict[str, Any]]) -> list[RetrievalResult]:
        results: list[RetrievalResult] = []
        for hit in raw_hits:
            meta = hit.get("metadata", {})
            citation = Citation(
                document_id=hit.get("id"),
                source=meta.get("source", "unknown"),
                chunk_index=meta.get("chunk_index"),
                page=meta.get("page"),
                score=hit.get("score"),
                metadata=meta,
            )
            results.append(RetrievalResult(content=hit.get("content", ""), citation=citation))
        return results
