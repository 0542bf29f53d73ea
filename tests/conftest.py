"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.messages import AIMessage
from qdrant_client import QdrantClient

from knowledge_rag.config import Settings
from knowledge_rag.retrieval.qdrant_store import QdrantVectorStore
from knowledge_rag.service import RAGService

EMBEDDING_DIM = 768


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        google_api_key="test-key",
        qdrant_url="http://localhost:6333",
        qdrant_collection="test-collection",
        embedding_dim=EMBEDDING_DIM,
    )


@pytest.fixture()
def fake_embeddings() -> DeterministicFakeEmbedding:
    """Same text → same vector, so an exact-text query scores 1.0."""
    return DeterministicFakeEmbedding(size=EMBEDDING_DIM)


@pytest.fixture()
def memory_store(fake_embeddings: DeterministicFakeEmbedding) -> QdrantVectorStore:
    return QdrantVectorStore(
        QdrantClient(":memory:"),
        fake_embeddings,
        "test-collection",
        embedding_dim=EMBEDDING_DIM,
        batch_size=4,
    )


@pytest.fixture()
def echo_llm() -> MagicMock:
    """Chat model stand-in that replies with the prompt it was given."""
    llm = MagicMock()
    llm.invoke.side_effect = lambda messages: AIMessage(content=messages[-1].content)
    return llm


@pytest.fixture()
def service(settings: Settings, memory_store: QdrantVectorStore, echo_llm: MagicMock) -> RAGService:
    return RAGService(settings, memory_store, echo_llm)
