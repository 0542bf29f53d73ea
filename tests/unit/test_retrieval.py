"""Unit tests for the retrieval layer: models, base, and SemanticRetriever."""

from __future__ import annotations

from typing import Any

import pytest

from knowledge_rag.retrieval.base import VectorStoreBase
from knowledge_rag.retrieval.models import Citation, RetrievalResult
from knowledge_rag.retrieval.retriever import SemanticRetriever


# ── Fake vector store for deterministic testing ─────────────────────────


class FakeVectorStore(VectorStoreBase):
    """In-memory fake that returns canned results."""

    def __init__(self, hits: list[dict[str, Any]] | None = None) -> None:
        super().__init__("test-collection")
        self._hits: list[dict[str, Any]] = hits or []
        self.last_threshold: float | None = None

    def ensure_collection(self) -> None:
        pass

    def add_documents(self, chunks, *, deadline=None) -> int:  # noqa: ANN001
        return len(chunks)

    def similarity_search_by_text(
        self,
        query: str,
        *,
        k: int = 5,
        score_threshold: float | None = None,
    ) -> list[dict[str, Any]]:
        self.last_threshold = score_threshold
        return self._hits[:k]

    def clear(self) -> None:
        self._hits = []

    def health_check(self) -> bool:
        return True


# ── Fixtures ────────────────────────────────────────────────────────────

SAMPLE_HITS: list[dict[str, Any]] = [
    {
        "id": "p-001",
        "content": "Qdrant stores vectors with payloads.",
        "score": 0.92,
        "metadata": {"source": "qdrant_guide.pdf", "type": "pdf", "chunk_index": 3, "page": 7},
    },
    {
        "id": "p-002",
        "content": "The sky is blue.",
        "score": 0.87,
        "metadata": {"source": "direct-input", "type": "text", "chunk_index": 0},
    },
    {
        "id": "p-003",
        "content": "Cosine similarity compares angles.",
        "score": 0.45,
        "metadata": {"source": "https://example.com/cosine", "type": "website"},
    },
]


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore(hits=SAMPLE_HITS)


@pytest.fixture()
def retriever(fake_store: FakeVectorStore) -> SemanticRetriever:
    return SemanticRetriever(fake_store, default_k=5)


# ── Citation model tests ───────────────────────────────────────────────


class TestCitation:
    def test_label_with_page(self) -> None:
        c = Citation(source="guide.pdf", page=3)
        assert c.label() == "guide.pdf, page 3"

    def test_label_without_page(self) -> None:
        assert Citation(source="direct-input").label() == "direct-input"

    def test_default_source_is_unknown(self) -> None:
        assert Citation().source == "unknown"

    def test_retrieved_at_is_set(self) -> None:
        assert Citation().retrieved_at is not None


class TestRetrievalResult:
    def test_str_includes_label_and_content(self) -> None:
        r = RetrievalResult(
            content="Some long content about vector stores.",
            citation=Citation(source="guide.pdf", page=1),
        )
        text = str(r)
        assert "[guide.pdf, page 1]" in text
        assert "vector stores" in text


# ── SemanticRetriever tests ────────────────────────────────────────────


class TestSemanticRetriever:
    def test_search_returns_retrieval_results(self, retriever: SemanticRetriever) -> None:
        results = retriever.search("What is Qdrant?")
        assert len(results) == 3
        assert all(isinstance(r, RetrievalResult) for r in results)

    def test_rank_order_preserved(self, retriever: SemanticRetriever) -> None:
        results = retriever.search("anything")
        assert [r.citation.document_id for r in results] == ["p-001", "p-002", "p-003"]

    def test_citations_populated(self, retriever: SemanticRetriever) -> None:
        first = retriever.search("Qdrant")[0].citation
        assert first.document_id == "p-001"
        assert first.source == "qdrant_guide.pdf"
        assert first.chunk_index == 3
        assert first.page == 7
        assert first.score == 0.92

    def test_k_limits_results(self, fake_store: FakeVectorStore) -> None:
        retriever = SemanticRetriever(fake_store, default_k=2)
        assert len(retriever.search("anything")) == 2

    def test_explicit_k_overrides_default(self, retriever: SemanticRetriever) -> None:
        assert len(retriever.search("anything", k=1)) == 1

    def test_explicit_zero_k_is_not_replaced_by_default(self, retriever: SemanticRetriever) -> None:
        assert retriever.search("anything", k=0) == []

    def test_score_threshold_forwarded(self, fake_store: FakeVectorStore) -> None:
        SemanticRetriever(fake_store, score_threshold=0.5).search("query")
        assert fake_store.last_threshold == 0.5

    def test_empty_store_returns_empty(self) -> None:
        retriever = SemanticRetriever(FakeVectorStore(hits=[]))
        assert retriever.search("anything") == []

    def test_missing_metadata_fields_handled(self) -> None:
        sparse_hit = [{"id": "x", "content": "text", "score": 0.8, "metadata": {}}]
        results = SemanticRetriever(FakeVectorStore(hits=sparse_hit)).search("query")
        assert results[0].citation.source == "unknown"
        assert results[0].citation.chunk_index is None
        assert results[0].citation.page is None


def test_lazy_qdrant_export() -> None:
    import knowledge_rag.retrieval as retrieval
    from knowledge_rag.retrieval.qdrant_store import QdrantVectorStore

    assert retrieval.QdrantVectorStore is QdrantVectorStore
