"""
Retrieval: vector storage, similarity search, and citations.

Public surface
--------------
- :class:`SemanticRetriever`: ranked search returning results with citations.
- :class:`VectorStoreBase`: abstract backend.
- :class:`QdrantVectorStore`: default Qdrant backend.
- :class:`Citation`, :class:`RetrievalResult`: data models.
"""

from knowledge_rag.retrieval.base import VectorStoreBase
from knowledge_rag.retrieval.models import Citation, RetrievalResult
from knowledge_rag.retrieval.retriever import SemanticRetriever

__all__ = [
    "Citation",
    "QdrantVectorStore",
    "RetrievalResult",
    "SemanticRetriever",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import QdrantVectorStore to avoid pulling in qdrant_client at import time."""
    if name == "QdrantVectorStore":
        from knowledge_rag.retrieval.qdrant_store import QdrantVectorStore

        return QdrantVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
