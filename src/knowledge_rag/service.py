"""Ingestion and query service: the seam between HTTP handlers and the pipeline.

Write path::

    load / scrape  →  chunk_documents  →  store.add_documents

Read path::

    RAGAnswerer.answer  →  retriever.search  →  chat model
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from knowledge_rag.answering.answerer import RAGAnswerer
from knowledge_rag.errors import MissingFieldError
from knowledge_rag.ingestion.chunker import chunk_documents
from knowledge_rag.ingestion.loader import load_raw_text, load_upload
from knowledge_rag.ingestion.scraper import scrape_website
from knowledge_rag.retrieval.retriever import SemanticRetriever

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.language_models import BaseChatModel

    from knowledge_rag.config import Settings
    from knowledge_rag.deadline import Deadline
    from knowledge_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Outcome of one ingestion request."""

    source: str
    chunks: int

    @property
    def added(self) -> bool:
        return self.chunks > 0


class RAGService:
    """Everything an HTTP handler needs, wired from one :class:`Settings`.

    Parameters
    ----------
    settings:
        Validated application settings.
    store:
        Vector-store backend shared by the read and write paths.
    llm:
        Chat model used for answering.
    """

    def __init__(self, settings: Settings, store: VectorStoreBase, llm: BaseChatModel) -> None:
        self.settings = settings
        self.store = store
        self.retriever = SemanticRetriever(
            store,
            default_k=settings.retrieval_k,
            score_threshold=settings.score_threshold,
        )
        self.answerer = RAGAnswerer(self.retriever, llm, k=settings.retrieval_k)

    @classmethod
    def from_settings(cls, settings: Settings) -> RAGService:
        """Build the production service: Google embeddings + chat, Qdrant storage."""
        from knowledge_rag.answering.llm import get_llm
        from knowledge_rag.ingestion.embedder import get_embedding_function
        from knowledge_rag.retrieval.qdrant_store import QdrantVectorStore

        store = QdrantVectorStore.from_settings(settings, get_embedding_function(settings))
        return cls(settings, store, get_llm(settings))

    # -- write path -----------------------------------------------------------

    def ingest_upload(
        self,
        data: bytes,
        filename: str,
        content_type: str | None,
        *,
        deadline: Deadline | None = None,
    ) -> IngestionResult:
        documents = load_upload(
            data, filename, content_type, max_bytes=self.settings.max_upload_bytes
        )
        return self._ingest(filename, documents, deadline)

    def ingest_text(self, text: str | None, *, deadline: Deadline | None = None) -> IngestionResult:
        documents = load_raw_text(text)
        return self._ingest("direct-input", documents, deadline)

    def ingest_url(self, url: str | None, *, deadline: Deadline | None = None) -> IngestionResult:
        url = (url or "").strip()
        if not url:
            raise MissingFieldError("No URL provided.")
        timeout = self.settings.scrape_timeout
        if deadline is not None:
            deadline.check("fetching the page")
            timeout = deadline.timeout_for(timeout)
        documents = scrape_website(url, timeout=timeout)
        return self._ingest(url, documents, deadline)

    def _ingest(
        self,
        source: str,
        documents: list[Document],
        deadline: Deadline | None,
    ) -> IngestionResult:
        chunks = chunk_documents(
            documents,
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
        )
        logger.info("Split %s into %d chunks", source, len(chunks))
        if not chunks:
            return IngestionResult(source=source, chunks=0)

        written = self.store.add_documents(chunks, deadline=deadline)
        logger.info("Added %d chunks from %s to the vector store", written, source)
        return IngestionResult(source=source, chunks=written)

    # -- read path ------------------------------------------------------------

    def answer(self, question: str | None, *, deadline: Deadline | None = None) -> str:
        if not question or not question.strip():
            raise MissingFieldError("No message provided.")
        return self.answerer.answer(question, deadline=deadline)

    # -- store management -----------------------------------------------------

    def stats(self) -> dict[str, object]:
        self.store.ensure_collection()
        return {
            "status": "ready",
            "message": "Store is operational",
            "collection": self.store.collection_name,
            "points": self.store.count(),
        }

    def clear(self) -> None:
        logger.warning("Clearing collection %r", self.store.collection_name)
        self.store.clear()
