"""Exception taxonomy shared by every layer.

Each error carries the HTTP status the serving layer answers with and a
short, machine-safe ``message``.  Internal detail (upstream exception
text and the like) goes into ``details`` and is never required for
correct behaviour.
"""

from __future__ import annotations

from typing import Any


class RAGError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str, *, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


# ── 400: rejected before any external call ────────────────────────────


class InputValidationError(RAGError):
    """The request itself is malformed or incomplete."""

    status_code = 400


class MissingFieldError(InputValidationError):
    """A required request field was absent."""


class EmptyInputError(InputValidationError):
    """Raw text was empty once whitespace was stripped."""


class EmptyContentError(InputValidationError):
    """A source produced no usable text."""


class UnsupportedTypeError(InputValidationError):
    """An uploaded file has a MIME type we cannot ingest."""

    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type}")


class FileTooLargeError(InputValidationError):
    """An uploaded file exceeds the configured size limit."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"File too large: {size} bytes (limit is {limit} bytes).")


# ── 500: an external collaborator failed ──────────────────────────────


class UpstreamUnavailableError(RAGError):
    """An embedding, chat, vector-db or network call failed."""

    status_code = 500


class StoreUnavailableError(UpstreamUnavailableError):
    """The vector database could not be reached or refused the operation."""


class ScrapeError(UpstreamUnavailableError):
    """Fetching a web page failed."""


class AnswerGenerationError(UpstreamUnavailableError):
    """The chat model did not produce a reply."""


class ProcessingError(UpstreamUnavailableError):
    """Catch-all for unexpected failures while serving an endpoint."""


class PartialFailureError(RAGError):
    """Some, but not necessarily all, of a write reached the store."""

    status_code = 500


class IngestionFailedError(PartialFailureError):
    """Writing chunks to the vector store stopped part way through."""

    def __init__(
        self,
        message: str,
        *,
        chunks_written: int,
        total: int,
        details: str | None = None,
    ) -> None:
        self.chunks_written = chunks_written
        self.total = total
        super().__init__(message, details=details)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["chunks_written"] = self.chunks_written
        payload["chunks_total"] = self.total
        return payload


# ── 408 ───────────────────────────────────────────────────────────────


class RequestTimeoutError(RAGError):
    """The request's wall-clock budget ran out.

    When the budget runs out part way through a write, ``chunks_written``
    and ``total`` say how much of it already reached the store.
    """

    status_code = 408

    def __init__(
        self,
        message: str = "Request timeout. Please try again.",
        *,
        chunks_written: int | None = None,
        total: int | None = None,
        details: str | None = None,
    ) -> None:
        self.chunks_written = chunks_written
        self.total = total
        super().__init__(message, details=details)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.chunks_written is not None:
            payload["chunks_written"] = self.chunks_written
            payload["chunks_total"] = self.total
        return payload


# ── startup ───────────────────────────────────────────────────────────


class ConfigurationError(Exception):
    """Required configuration is missing or inconsistent."""

    def __init__(self, missing: list[str], message: str | None = None) -> None:
        self.missing = list(missing)
        if message is None:
            message = "Missing required environment variables: " + ", ".join(self.missing)
        self.message = message
        super().__init__(message)
