"""Unit tests for prompt construction and grounded answering."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from knowledge_rag.answering.answerer import RAGAnswerer, _message_text
from knowledge_rag.answering.prompts import (
    NO_CONTEXT_REPLY,
    build_prompt_text,
    build_rag_prompt,
    format_grounding_block,
)
from knowledge_rag.deadline import Deadline
from knowledge_rag.errors import AnswerGenerationError, RequestTimeoutError
from knowledge_rag.retrieval.models import Citation, RetrievalResult


def _results() -> list[RetrievalResult]:
    return [
        RetrievalResult(content="The sky is blue.", citation=Citation(source="direct-input")),
        RetrievalResult(content="Roses are red.", citation=Citation(source="poems.pdf", page=4)),
    ]


def _retriever(results: list[RetrievalResult]) -> MagicMock:
    retriever = MagicMock()
    retriever.search.return_value = results
    return retriever


# ── Prompts ───────────────────────────────────────────────────────────


class TestPrompts:
    def test_grounding_block_format_and_order(self) -> None:
        block = format_grounding_block(_results())
        assert block == (
            "Document 1 (direct-input):\nThe sky is blue.\n\n"
            "Document 2 (poems.pdf, page 4):\nRoses are red."
        )

    def test_prompt_has_instruction_context_and_question(self) -> None:
        text = build_prompt_text("What color is the sky?", _results())
        assert text.startswith("You are an AI assistant.")
        assert "strictly using the provided context" in text
        assert "don't have enough information" in text
        assert "cite which document(s)" in text
        assert "Document 1 (direct-input):\nThe sky is blue." in text
        assert text.endswith("User question:\nWhat color is the sky?")

    def test_rag_prompt_is_single_human_message(self) -> None:
        messages = build_rag_prompt("q", _results())
        assert len(messages) == 1
        assert isinstance(messages[0], HumanMessage)


# ── Answerer ──────────────────────────────────────────────────────────


class TestRAGAnswerer:
    def test_no_results_short_circuits(self) -> None:
        llm = MagicMock()
        answerer = RAGAnswerer(_retriever([]), llm)
        assert answerer.answer("anything") == NO_CONTEXT_REPLY
        llm.invoke.assert_not_called()

    def test_searches_with_k(self, echo_llm: MagicMock) -> None:
        retriever = _retriever(_results())
        RAGAnswerer(retriever, echo_llm, k=5).answer("What color is the sky?")
        retriever.search.assert_called_once_with("What color is the sky?", k=5)

    def test_reply_returned_verbatim(self) -> None:
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content="The sky is blue (Document 1).")
        reply = RAGAnswerer(_retriever(_results()), llm).answer("What color is the sky?")
        assert reply == "The sky is blue (Document 1)."

    def test_echoed_prompt_cites_source(self, echo_llm: MagicMock) -> None:
        reply = RAGAnswerer(_retriever(_results()[:1]), echo_llm).answer("What color is the sky?")
        assert "blue" in reply
        assert "direct-input" in reply

    def test_model_failure_raises_once(self) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("quota exceeded")
        answerer = RAGAnswerer(_retriever(_results()), llm)
        with pytest.raises(AnswerGenerationError) as info:
            answerer.answer("q")
        assert info.value.details == "quota exceeded"
        assert llm.invoke.call_count == 1

    def test_expired_deadline_skips_search(self) -> None:
        retriever = _retriever(_results())
        with pytest.raises(RequestTimeoutError):
            RAGAnswerer(retriever, MagicMock()).answer("q", deadline=Deadline(0))
        retriever.search.assert_not_called()


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("plain", "plain"),
        ([{"type": "text", "text": "a"}, {"type": "text", "text": "b"}], "ab"),
        (["x", {"type": "image_url", "image_url": "..."}], "x"),
    ],
)
def test_message_text_flattens_parts(content, expected: str) -> None:  # noqa: ANN001
    assert _message_text(content) == expected
