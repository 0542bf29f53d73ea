"""FastAPI application exposing ingestion and chat as a REST API."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import asynccontextmanager, contextmanager

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from knowledge_rag.config import Settings, load_settings
from knowledge_rag.deadline import Deadline
from knowledge_rag.errors import (
    FileTooLargeError,
    MissingFieldError,
    ProcessingError,
    RAGError,
    StoreUnavailableError,
)
from knowledge_rag.service import IngestionResult, RAGService

logger = logging.getLogger(__name__)


# ── Request / Response schemas ────────────────────────────────────────
# Request fields are optional so that missing values produce our own
# 400 messages instead of FastAPI's generic 422.
class TextRequest(BaseModel):
    text: str | None = None


class ScrapeRequest(BaseModel):
    url: str | None = None


class ChatRequest(BaseModel):
    message: str | None = None


class IngestResponse(BaseModel):
    message: str
    chunks: int


class ChatResponse(BaseModel):
    reply: str


class StatsResponse(BaseModel):
    status: str
    message: str
    collection: str | None = None
    points: int | None = None


class MessageResponse(BaseModel):
    message: str


# ── Helpers ───────────────────────────────────────────────────────────
def get_service(request: Request) -> RAGService:
    return request.app.state.service


@contextmanager
def translate_errors(failure_message: str) -> Iterator[None]:
    """Turn unexpected failures into a :class:`ProcessingError` with *failure_message*.

    Store outages also take the endpoint's message; every other
    :class:`RAGError` already carries the right status and text.
    """
    try:
        yield
    except StoreUnavailableError as exc:
        logger.error("%s %s", failure_message, exc.details or exc.message)
        raise ProcessingError(failure_message, details=exc.details or exc.message) from exc
    except RAGError:
        raise
    except Exception as exc:
        logger.exception(failure_message)
        raise ProcessingError(failure_message, details=str(exc)) from exc


def _read_upload(file: UploadFile, limit: int) -> bytes:
    """Read at most *limit* bytes of *file*, rejecting anything larger."""
    if file.size is not None and file.size > limit:
        raise FileTooLargeError(file.size, limit)
    data = file.file.read(limit + 1)
    if len(data) > limit:
        raise FileTooLargeError(file.size or len(data), limit)
    return data


def _ingest_response(result: IngestionResult, success_message: str) -> IngestResponse:
    if not result.added:
        return IngestResponse(message=f"No content was added from '{result.source}'.", chunks=0)
    return IngestResponse(message=success_message, chunks=result.chunks)


# ── Application factory ───────────────────────────────────────────────
def create_app(settings: Settings | None = None, service: RAGService | None = None) -> FastAPI:
    """Build the API around *service* (or one wired from *settings*)."""
    if service is None:
        settings = settings or load_settings()
        service = RAGService.from_settings(settings)
    settings = service.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            service.store.ensure_collection()
        except StoreUnavailableError as exc:
            logger.warning("Vector store not ready at startup: %s", exc.details or exc.message)
        yield

    app = FastAPI(
        title="Knowledge RAG API",
        version="0.1.0",
        description="Ingest documents into a vector store and chat with them.",
        lifespan=lifespan,
    )
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RAGError)
    async def rag_error_handler(request: Request, exc: RAGError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body.", "details": str(exc.errors())},
        )

    # ── Routes ────────────────────────────────────────────────────────
    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness check."""
        return {"status": "ok"}

    @app.post("/api/upload", response_model=IngestResponse)
    def upload(
        file: UploadFile | None = File(None),
        svc: RAGService = Depends(get_service),
    ) -> IngestResponse:
        """Ingest a PDF, TXT or CSV file."""
        if file is None or not file.filename:
            raise MissingFieldError("No file uploaded.")
        deadline = Deadline(settings.upload_timeout)
        logger.info("Received file: %s, type: %s", file.filename, file.content_type)
        with translate_errors("Failed to process file."):
            data = _read_upload(file, settings.max_upload_bytes)
            result = svc.ingest_upload(data, file.filename, file.content_type, deadline=deadline)
        return _ingest_response(
            result, f"File '{file.filename}' uploaded and processed successfully."
        )

    @app.post("/api/text", response_model=IngestResponse)
    def add_text(body: TextRequest, svc: RAGService = Depends(get_service)) -> IngestResponse:
        """Ingest text submitted directly."""
        deadline = Deadline(settings.text_timeout)
        with translate_errors("Failed to process text input."):
            result = svc.ingest_text(body.text, deadline=deadline)
        return _ingest_response(result, "Text content added to RAG store successfully.")

    @app.post("/api/scrape", response_model=IngestResponse)
    def scrape(body: ScrapeRequest, svc: RAGService = Depends(get_service)) -> IngestResponse:
        """Scrape a web page and ingest its visible text."""
        deadline = Deadline(settings.scrape_timeout)
        with translate_errors("Failed to scrape website."):
            result = svc.ingest_url(body.url, deadline=deadline)
        return _ingest_response(
            result, f"Website content from '{result.source}' scraped and indexed successfully."
        )

    @app.post("/api/chat", response_model=ChatResponse)
    def chat(body: ChatRequest, svc: RAGService = Depends(get_service)) -> ChatResponse:
        """Answer a question from the stored chunks."""
        deadline = Deadline(settings.chat_timeout)
        with translate_errors("Failed to get a chat reply."):
            reply = svc.answer(body.message, deadline=deadline)
        return ChatResponse(reply=reply)

    @app.get("/api/store/stats", response_model=StatsResponse)
    def stats(svc: RAGService = Depends(get_service)) -> StatsResponse:
        """Report whether the store is reachable and how many chunks it holds."""
        with translate_errors("Failed to get store statistics."):
            return StatsResponse(**svc.stats())

    @app.delete("/api/store/clear", response_model=MessageResponse)
    def clear(svc: RAGService = Depends(get_service)) -> MessageResponse:
        """Drop every stored chunk and recreate the empty collection."""
        with translate_errors("Failed to clear store."):
            svc.clear()
        return MessageResponse(message="Store cleared and recreated successfully.")

    return app
