"""Tests for title and element extraction."""

import logging

import pytest
from bs4 import BeautifulSoup

from selector_scraper.content import extract_content, select_elements
from selector_scraper.errors import ParseError
from selector_scraper.models import ImageCandidate

PAGE_URL = "https://example.com/shop/"

PAGE = b"""
<html>
  <head><title> Demo </title></head>
  <body>
    <div class="product-image"><img src="https://cdn.example.com/x.png"></div>
    <div class="product-image"><img src="thumbs/y.gif"></div>
    <div class="product-image"><img alt="placeholder"></div>
    <div class="product-image"><img src=""></div>
    <img class="hero" src="/hero.jpg">
  </body>
</html>
"""


class TestExtractContent:
    def test_title_and_candidates(self) -> None:
        content = extract_content(PAGE, "div.product-image img", PAGE_URL)
        assert content.title == "Demo"
        assert content.candidates == (
            ImageCandidate("https://cdn.example.com/x.png", "https://cdn.example.com/x.png"),
            ImageCandidate("thumbs/y.gif", "https://example.com/shop/thumbs/y.gif"),
        )

    def test_elements_without_src_are_skipped(self) -> None:
        """Matched elements lacking a source attribute shall not be errors."""
        content = extract_content(PAGE, "div.product-image", PAGE_URL)
        assert content.candidates == ()

    def test_missing_title_is_empty(self) -> None:
        content = extract_content(b"<html><body><img src='/a.png'></body></html>", "img", PAGE_URL)
        assert content.title == ""
        assert [c.absolute_url for c in content.candidates] == ["https://example.com/a.png"]

    def test_malformed_source_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        body = b'<img src="http://[bad/x.png"><img src="/ok.png">'
        with caplog.at_level(logging.WARNING, logger="selector_scraper"):
            content = extract_content(body, "img", PAGE_URL)
        assert [c.absolute_url for c in content.candidates] == ["https://example.com/ok.png"]
        assert "Skipping malformed image source" in caplog.text

    def test_invalid_selector_keeps_title(self, caplog: pytest.LogCaptureFixture) -> None:
        """A selector that cannot be applied shall be logged and keep partial content."""
        with caplog.at_level(logging.ERROR, logger="selector_scraper"):
            content = extract_content(PAGE, "div[", PAGE_URL)
        assert content.title == "Demo"
        assert content.candidates == ()
        assert "Failed to parse content" in caplog.text


class TestSelectElements:
    def test_raises_parse_error(self) -> None:
        soup = BeautifulSoup(PAGE, "html.parser")
        with pytest.raises(ParseError) as excinfo:
            select_elements(soup, "div[")
        assert excinfo.value.selector == "div["
