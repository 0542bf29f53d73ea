"""Prompt templates for grounded answering.

Keeping prompts in one place makes them easy to audit and version.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from knowledge_rag.retrieval.models import RetrievalResult

NO_CONTEXT_REPLY = (
    "I don't have any relevant information to answer your question. "
    "Please make sure you've uploaded documents to the RAG store first."
)

SYSTEM_INSTRUCTION = """\
You are an AI assistant. Answer the user's question strictly using the provided context from uploaded documents.
If the answer is not present in the context, say you don't have enough information.
Always cite which document(s) you're referencing in your answer.

Context from uploaded documents:
{context}"""


def format_grounding_block(results: list[RetrievalResult]) -> str:
    """Number the chunks in rank order, labelled with source and page."""
    return "\n\n".join(
        f"Document {i} ({r.citation.label()}):\n{r.content}"
        for i, r in enumerate(results, 1)
    )


def build_prompt_text(question: str, results: list[RetrievalResult]) -> str:
    """System instruction with the grounding block, followed by the question."""
    system = SYSTEM_INSTRUCTION.format(context=format_grounding_block(results)).strip()
    return f"{system}\n\nUser question:\n{question}"


def build_rag_prompt(question: str, results: list[RetrievalResult]) -> list[BaseMessage]:
    """Assemble the single-message prompt sent to the chat model."""
    return [HumanMessage(content=build_prompt_text(question, results))]
