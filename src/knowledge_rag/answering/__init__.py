"""
Answering: grounded chat completion over retrieved chunks.

Public API
----------
- :class:`RAGAnswerer`: search, build the grounding prompt, call the model.
- :data:`NO_CONTEXT_REPLY`: reply used when nothing relevant is stored.
"""

from knowledge_rag.answering.answerer import RAGAnswerer
from knowledge_rag.answering.prompts import NO_CONTEXT_REPLY

__all__ = ["NO_CONTEXT_REPLY", "RAGAnswerer"]
