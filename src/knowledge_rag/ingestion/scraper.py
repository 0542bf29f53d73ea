"""Web page fetching and boiler-plate stripping."""

from __future__ import annotations

import logging
import re

import requests
from bs4 import BeautifulSoup
from langchain_core.documents import Document

from knowledge_rag.errors import EmptyContentError, ScrapeError
from knowledge_rag.ingestion.models import WebsiteMeta

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
BOILERPLATE_TAGS = ["script", "style", "nav", "footer", "header"]

_WHITESPACE_RE = re.compile(r"\s+")


def extract_text(html: str) -> tuple[str, str | None]:
    """Return ``(body_text, title)`` with boiler-plate tags removed.

    Whitespace runs collapse to a single space.
    """
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.string.strip() if soup.title and soup.title.string else None

    for tag in soup(BOILERPLATE_TAGS):
        tag.decompose()

    root = soup.body or soup
    text = _WHITESPACE_RE.sub(" ", root.get_text(separator=" ")).strip()
    return text, title


def scrape_website(
    url: str,
    *,
    timeout: float = 30.0,
    user_agent: str = DEFAULT_USER_AGENT,
) -> list[Document]:
    """Download *url* once and return its visible text as one document.

    Raises
    ------
    ScrapeError
        On any transport or HTTP-status failure.  No retry is attempted.
    EmptyContentError
        When the page has no visible text.
    """
    logger.info("Scraping %s (timeout=%.1fs)", url, timeout)
    try:
        resp = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Fetch failed for %s: %s", url, exc)
        raise ScrapeError(f"Failed to scrape website: {exc}") from exc

    text, title = extract_text(resp.text)
    if not text:
        raise EmptyContentError("No content found at the provided URL.")

    logger.info("Scraped %s (%d chars)", url, len(text))
    meta = WebsiteMeta(source=url, title=title)
    return [Document(page_content=text, metadata=meta.to_metadata())]
