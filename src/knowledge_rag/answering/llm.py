"""LLM initialisation: single place to configure the chat provider."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_google_genai import ChatGoogleGenerativeAI

if TYPE_CHECKING:
    from knowledge_rag.config import Settings

logger = logging.getLogger(__name__)


def get_llm(settings: Settings) -> ChatGoogleGenerativeAI:
    """Return the configured Gemini chat model.

    ``max_retries=0`` keeps every answer to a single attempt.
    """
    logger.info("Using chat model %s", settings.chat_model)
    return ChatGoogleGenerativeAI(
        model=settings.chat_model,
        google_api_key=settings.google_api_key,
        temperature=settings.chat_temperature,
        max_retries=0,
        timeout=settings.chat_timeout,
    )
