"""Qdrant implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from qdrant_client import QdrantClient, models

from knowledge_rag.errors import (
    IngestionFailedError,
    RequestTimeoutError,
    StoreUnavailableError,
)
from knowledge_rag.retrieval.base import VectorStoreBase

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

    from knowledge_rag.config import Settings
    from knowledge_rag.deadline import Deadline

logger = logging.getLogger(__name__)

# Payload layout shared with langchain-qdrant so either client can read the points.
CONTENT_KEY = "page_content"
METADATA_KEY = "metadata"


class QdrantVectorStore(VectorStoreBase):
    """Qdrant-backed vector store.

    Parameters
    ----------
    client:
        A connected ``QdrantClient`` (``QdrantClient(":memory:")`` in tests).
    embeddings:
        LangChain embedding model used for both chunks and queries.
    collection_name:
        Name of the Qdrant collection.
    embedding_dim:
        Vector size the collection is created with; every write must match.
    batch_size:
        Chunks embedded and upserted per round trip.
    """

    def __init__(
        self,
        client: QdrantClient,
        embeddings: Embeddings,
        collection_name: str = "chaicode-collection",
        *,
        embedding_dim: int = 768,
        batch_size: int = 64,
    ) -> None:
        super().__init__(collection_name)
        self._client = client
        self._embeddings = embeddings
        self.embedding_dim = embedding_dim
        self.batch_size = batch_size
        self._ready = False

    @classmethod
    def from_settings(cls, settings: Settings, embeddings: Embeddings) -> QdrantVectorStore:
        """Build a store talking to ``settings.qdrant_url``."""
        client = QdrantClient(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key or None,
            timeout=settings.qdrant_timeout,
        )
        return cls(
            client,
            embeddings,
            settings.qdrant_collection,
            embedding_dim=settings.embedding_dim,
            batch_size=settings.embed_batch_size,
        )

    # -- VectorStoreBase overrides --------------------------------------------

    def ensure_collection(self) -> None:
        if self._ready:
            return
        try:
            if not self._client.collection_exists(self.collection_name):
                logger.info("Collection %r does not exist, creating it", self.collection_name)
                self._create_collection()
            else:
                logger.info("Connected to existing collection %r", self.collection_name)
        except Exception as exc:
            raise StoreUnavailableError(
                "Vector store is unavailable.", details=str(exc)
            ) from exc
        self._ready = True

    def add_documents(self, chunks: list[Document], *, deadline: Deadline | None = None) -> int:
        total = len(chunks)
        if not chunks:
            return 0

        self.ensure_collection()
        written = 0
        for start in range(0, total, self.batch_size):
            batch = chunks[start : start + self.batch_size]
            if deadline is not None:
                try:
                    deadline.check(f"writing chunks after {written}/{total}")
                except RequestTimeoutError as exc:
                    raise RequestTimeoutError(
                        chunks_written=written, total=total, details=exc.details
                    ) from exc
            try:
                vectors = self._embeddings.embed_documents([c.page_content for c in batch])
                self._check_dimensions(vectors)
                self._client.upsert(
                    collection_name=self.collection_name,
                    points=[
                        models.PointStruct(
                            id=str(uuid.uuid4()),
                            vector=vector,
                            payload={CONTENT_KEY: chunk.page_content, METADATA_KEY: chunk.metadata},
                        )
                        for chunk, vector in zip(batch, vectors)
                    ],
                    wait=True,
                )
            except Exception as exc:
                logger.error("Ingestion failed after %d/%d chunks: %s", written, total, exc)
                raise IngestionFailedError(
                    "Failed to add chunks to the vector store.",
                    chunks_written=written,
                    total=total,
                    details=str(exc),
                ) from exc
            written += len(batch)
            logger.info("  upserted %d / %d chunks", written, total)
        return written

    def similarity_search_by_text(
        self,
        query: str,
        *,
        k: int = 5,
        score_threshold: float | None = None,
    ) -> list[dict[str, Any]]:
        self.ensure_collection()
        try:
            embedding = self._embeddings.embed_query(query)
            response = self._client.query_points(
                collection_name=self.collection_name,
                query=embedding,
                limit=k,
                with_payload=True,
                score_threshold=score_threshold,
            )
        except Exception as exc:
            raise StoreUnavailableError("Similarity search failed.", details=str(exc)) from exc

        hits: list[dict[str, Any]] = []
        for point in response.points:
            payload = point.payload or {}
            hits.append(
                {
                    "id": str(point.id),
                    "content": payload.get(CONTENT_KEY, ""),
                    "score": point.score,
                    "metadata": payload.get(METADATA_KEY) or {},
                }
            )
        return hits

    def clear(self) -> None:
        # Any later write recreates the collection lazily if the steps below fail.
        self._ready = False
        try:
            self._client.delete_collection(self.collection_name)
            logger.info("Deleted collection %r", self.collection_name)
            self._create_collection()
        except Exception as exc:
            raise StoreUnavailableError("Failed to clear store.", details=str(exc)) from exc
        self._ready = True

    def health_check(self) -> bool:
        try:
            self._client.get_collections()
            return True
        except Exception:
            logger.warning("Qdrant health-check failed", exc_info=True)
            return False

    def count(self) -> int | None:
        self.ensure_collection()
        try:
            return self._client.count(self.collection_name, exact=True).count
        except Exception as exc:
            raise StoreUnavailableError("Failed to count stored chunks.", details=str(exc)) from exc

    # -- internals ------------------------------------------------------------

    def _create_collection(self) -> None:
        self._client.create_collection(
            collection_name=self.collection_name,
            vectors_config=models.VectorParams(
                size=self.embedding_dim,
                distance=models.Distance.COSINE,
            ),
        )
        logger.info(
            "Created collection %r (size=%d, distance=cosine)",
            self.collection_name,
            self.embedding_dim,
        )

    def _check_dimensions(self, vectors: list[list[float]]) -> None:
        for vector in vectors:
            if len(vector) != self.embedding_dim:
                raise ValueError(
                    f"Embedding has {len(vector)} dimensions, collection "
                    f"{self.collection_name!r} expects {self.embedding_dim}"
                )
