"""Metadata shapes attached to normalised documents.

Every shape shares the ``source`` / ``type`` pair; the extra fields
depend on where the content came from.  Shapes are flattened into a
plain dict before being attached to a LangChain ``Document`` because
that dict travels unchanged into the vector-store payload.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Union

from pydantic import BaseModel, Field

DIRECT_INPUT_SOURCE = "direct-input"

# Character offset of each "Page N:" header in a PDF document's text.
# Consumed by the chunker and never stored with the chunks.
PAGE_STARTS_KEY = "page_starts"


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SourceMeta(BaseModel):
    """Fields common to every document."""

    source: str
    type: str

    def to_metadata(self) -> dict[str, Any]:
        """Flatten to the dict stored alongside each chunk (``None`` dropped)."""
        return self.model_dump(exclude_none=True)


class PdfMeta(SourceMeta):
    """An uploaded PDF, or the placeholder produced when extraction failed."""

    type: Literal["pdf"] = "pdf"
    pages: int | None = None
    extracted_at: str = Field(default_factory=_utcnow_iso)
    note: str | None = None
    error: str | None = None


class TextFileMeta(SourceMeta):
    """An uploaded plain-text or CSV file."""

    type: Literal["text", "csv"] = "text"
    mime_type: str = "text/plain"
    size_bytes: int | None = None


class WebsiteMeta(SourceMeta):
    """A scraped web page; ``source`` is the URL."""

    type: Literal["website"] = "website"
    title: str | None = None
    fetched_at: str = Field(default_factory=_utcnow_iso)


class DirectInputMeta(SourceMeta):
    """Text pasted straight into the API."""

    source: Literal["direct-input"] = DIRECT_INPUT_SOURCE
    type: Literal["text"] = "text"
    timestamp: str = Field(default_factory=_utcnow_iso)


DocumentMeta = Union[PdfMeta, TextFileMeta, WebsiteMeta, DirectInputMeta]
