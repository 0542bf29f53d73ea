"""Embedding collaborator factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_google_genai import GoogleGenerativeAIEmbeddings

if TYPE_CHECKING:
    from knowledge_rag.config import Settings

logger = logging.getLogger(__name__)


def get_embedding_function(settings: Settings) -> GoogleGenerativeAIEmbeddings:
    """Return the configured Google embedding model.

    ``text-embedding-004`` produces 768-dimensional vectors, which must
    match ``settings.embedding_dim`` or every write is rejected.
    """
    logger.info("Using embedding model %s (dim=%d)", settings.embedding_model, settings.embedding_dim)
    return GoogleGenerativeAIEmbeddings(
        model=settings.embedding_model,
        google_api_key=settings.google_api_key,
    )
