"""
Serving: FastAPI application and uvicorn entry point.

Exposes upload, text, scrape, chat and store-management endpoints over
HTTP; every handler delegates to :class:`knowledge_rag.service.RAGService`.
"""
