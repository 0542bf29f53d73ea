"""Document loaders: turn uploads and raw text into LangChain documents."""

from __future__ import annotations

import io
import logging

from langchain_core.documents import Document
from pypdf import PdfReader

from knowledge_rag.errors import EmptyInputError, FileTooLargeError, UnsupportedTypeError
from knowledge_rag.ingestion.models import (
    PAGE_STARTS_KEY,
    DirectInputMeta,
    PdfMeta,
    TextFileMeta,
)

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
TEXT_MIMES = {"text/plain": "text", "text/csv": "csv"}
SUPPORTED_MIME_TYPES = (PDF_MIME, *TEXT_MIMES)

PAGE_SEPARATOR = "\n\n"

MANUAL_EXTRACTION_NOTE = "manual extraction required"
NO_TEXT_NOTE = "no text content found"

_MANUAL_EXTRACTION_TEMPLATE = """\
PDF file "{filename}" has been uploaded but automatic text extraction failed.

To use this PDF content:
1. Open the PDF in a PDF reader
2. Select all text (Ctrl+A) and copy it (Ctrl+C)
3. Paste the text into the text input
4. Submit it to add it to the knowledge base

Error details: {error}"""

_NO_TEXT_TEMPLATE = (
    'PDF file "{filename}" was processed but contains no extractable text. '
    "It may be an image-based PDF or contain only graphics."
)


def _normalise_mime(content_type: str | None) -> str:
    """Drop parameters such as ``; charset=utf-8`` and lowercase."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def load_upload(
    data: bytes,
    filename: str,
    content_type: str | None,
    *,
    max_bytes: int | None = None,
) -> list[Document]:
    """Dispatch an uploaded file to the loader matching its MIME type.

    Parameters
    ----------
    data:
        Raw file bytes.
    filename:
        Original client-side name; becomes the ``source`` metadata.
    content_type:
        MIME type reported by the client.
    max_bytes:
        Reject files larger than this many bytes.

    Raises
    ------
    UnsupportedTypeError
        For anything other than PDF, plain text or CSV.
    FileTooLargeError
        When *max_bytes* is exceeded.
    """
    mime = _normalise_mime(content_type)
    if mime not in SUPPORTED_MIME_TYPES:
        raise UnsupportedTypeError(content_type or "unknown")
    if max_bytes is not None and len(data) > max_bytes:
        raise FileTooLargeError(len(data), max_bytes)

    logger.info("Loading upload %s (%s, %d bytes)", filename, mime, len(data))
    if mime == PDF_MIME:
        return load_pdf_bytes(data, filename)
    return load_text_bytes(data, filename, mime)


def load_pdf_bytes(data: bytes, filename: str) -> list[Document]:
    """Extract text page by page; never raises.

    Pages are concatenated under ``Page N:`` headers.  When the parser
    fails, or no page yields text, a single placeholder document is
    returned instead so the upload still succeeds.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as exc:
        logger.warning("PDF extraction failed for %s: %s", filename, exc)
        meta = PdfMeta(source=filename, note=MANUAL_EXTRACTION_NOTE, error=str(exc))
        content = _MANUAL_EXTRACTION_TEMPLATE.format(filename=filename, error=exc)
        return [Document(page_content=content, metadata=meta.to_metadata())]

    if not any(text.strip() for text in pages):
        logger.warning("PDF %s has no extractable text (%d pages)", filename, len(pages))
        meta = PdfMeta(source=filename, pages=len(pages), note=NO_TEXT_NOTE)
        content = _NO_TEXT_TEMPLATE.format(filename=filename)
        return [Document(page_content=content, metadata=meta.to_metadata())]

    sections: list[str] = []
    page_starts: list[int] = []
    offset = 0
    for n, text in enumerate(pages, 1):
        if sections:
            offset += len(PAGE_SEPARATOR)
        section = f"Page {n}:\n{text}"
        page_starts.append(offset)
        sections.append(section)
        offset += len(section)

    logger.info("Extracted text from %d pages of %s", len(pages), filename)
    metadata = PdfMeta(source=filename, pages=len(pages)).to_metadata()
    metadata[PAGE_STARTS_KEY] = page_starts
    return [Document(page_content=PAGE_SEPARATOR.join(sections).rstrip(), metadata=metadata)]


def load_text_bytes(data: bytes, filename: str, mime_type: str = "text/plain") -> list[Document]:
    """Decode a text or CSV upload verbatim; CSV rows are not parsed."""
    content = data.decode("utf-8", errors="replace")
    meta = TextFileMeta(
        source=filename,
        type=TEXT_MIMES.get(mime_type, "text"),
        mime_type=mime_type,
        size_bytes=len(data),
    )
    return [Document(page_content=content, metadata=meta.to_metadata())]


def load_raw_text(text: str | None) -> list[Document]:
    """Wrap text submitted directly to the API.

    Raises
    ------
    EmptyInputError
        When *text* is missing or whitespace only.
    """
    stripped = (text or "").strip()
    if not stripped:
        raise EmptyInputError("No text provided.")
    return [Document(page_content=stripped, metadata=DirectInputMeta().to_metadata())]
