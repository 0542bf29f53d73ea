"""Knowledge RAG: ingest documents into Qdrant and chat with them through Gemini."""

__version__ = "0.1.0"
