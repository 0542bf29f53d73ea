"""Unit tests for the web scraper: HTTP is always mocked."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from knowledge_rag.errors import EmptyContentError, ScrapeError
from knowledge_rag.ingestion.scraper import extract_text, scrape_website

PAGE = """\
<html>
  <head><title> Sky Facts </title><style>body {color: red}</style></head>
  <body>
    <header>Site header</header>
    <nav>Home | About</nav>
    <p>The sky   is
       blue.</p>
    <script>var tracking = 1;</script>
    <footer>Copyright</footer>
  </body>
</html>"""


def _response(html: str) -> MagicMock:
    return MagicMock(text=html, raise_for_status=MagicMock())


def test_extract_text_strips_boilerplate_and_collapses_whitespace() -> None:
    text, title = extract_text(PAGE)
    assert text == "The sky is blue."
    assert title == "Sky Facts"


def test_scrape_returns_single_website_document() -> None:
    with patch("requests.get", return_value=_response(PAGE)) as mock_get:
        docs = scrape_website("https://example.com/sky", timeout=5)

    assert len(docs) == 1
    assert docs[0].page_content == "The sky is blue."
    assert docs[0].metadata["source"] == "https://example.com/sky"
    assert docs[0].metadata["type"] == "website"
    assert docs[0].metadata["title"] == "Sky Facts"
    _, kwargs = mock_get.call_args
    assert kwargs["timeout"] == 5
    assert "User-Agent" in kwargs["headers"]


def test_transport_error_becomes_scrape_error() -> None:
    with patch("requests.get", side_effect=requests.ConnectionError("connection refused")):
        with pytest.raises(ScrapeError, match="Failed to scrape website: connection refused"):
            scrape_website("http://unreachable.invalid")


def test_http_error_status_becomes_scrape_error() -> None:
    resp = _response("")
    resp.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
    with patch("requests.get", return_value=resp):
        with pytest.raises(ScrapeError, match="404"):
            scrape_website("https://example.com/missing")


def test_page_without_visible_text_is_rejected() -> None:
    html = "<html><body><nav>menu</nav><script>x()</script></body></html>"
    with patch("requests.get", return_value=_response(html)):
        with pytest.raises(EmptyContentError):
            scrape_website("https://example.com/empty")
