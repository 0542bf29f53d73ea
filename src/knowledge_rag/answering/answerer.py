"""Retrieval-augmented answering: search, ground, generate."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from knowledge_rag.answering.prompts import NO_CONTEXT_REPLY, build_rag_prompt
from knowledge_rag.errors import AnswerGenerationError

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from knowledge_rag.deadline import Deadline
    from knowledge_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)


class RAGAnswerer:
    """Answer questions strictly from the chunks the retriever returns.

    Parameters
    ----------
    retriever:
        Source of ranked chunks.
    llm:
        Chat model invoked once per answered question.
    k:
        Number of chunks placed in the grounding block.
    """

    def __init__(self, retriever: SemanticRetriever, llm: BaseChatModel, *, k: int = 5) -> None:
        self._retriever = retriever
        self._llm = llm
        self.k = k

    def answer(self, question: str, *, deadline: Deadline | None = None) -> str:
        """Return the model's reply, or a canned reply when nothing is stored.

        Raises
        ------
        AnswerGenerationError
            When the chat model call fails.  There is no retry.
        """
        if deadline is not None:
            deadline.check("similarity search")
        results = self._retriever.search(question, k=self.k)
        if not results:
            logger.info("No relevant chunks; skipping model call")
            return NO_CONTEXT_REPLY

        messages = build_rag_prompt(question, results)
        logger.info(
            "Prompting with %d chunks (%d chars)", len(results), len(messages[0].content)
        )
        if deadline is not None:
            deadline.check("answer generation")
        try:
            response = self._llm.invoke(messages)
        except Exception as exc:
            logger.error("Chat model call failed: %s", exc)
            raise AnswerGenerationError("Failed to get a chat reply.", details=str(exc)) from exc
        return _message_text(response.content)


def _message_text(content: Any) -> str:
    """Flatten message content that may arrive as a list of parts."""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)
