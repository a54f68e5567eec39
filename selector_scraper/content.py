"""HTML parsing and element extraction."""

from __future__ import annotations

import logging
from typing import List, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from .errors import ParseError
from .models import ImageCandidate, PageContent

logger = logging.getLogger("selector_scraper")

IMAGE_SOURCE_ATTR = "src"


def parse_document(body: Union[bytes, str]) -> BeautifulSoup:
    return BeautifulSoup(body, "html.parser")


def extract_title(soup: BeautifulSoup) -> str:
    """Text of the document's ``<title>``, or an empty string."""
    if soup.title is None:
        return ""
    return soup.title.get_text().strip()


def select_elements(soup: BeautifulSoup, selector: str) -> List[Tag]:
    """Match ``selector`` against the document.

    The selector is handed to soupsieve unchanged; syntax errors are
    reported as :class:`ParseError`.
    """
    try:
        return soup.select(selector)
    except (SelectorSyntaxError, ValueError, NotImplementedError) as exc:
        raise ParseError(selector, str(exc)) from exc


def extract_content(body: Union[bytes, str], selector: str, page_url: str) -> PageContent:
    """Extract the title and image candidates matched by ``selector``.

    Elements without a ``src`` attribute are skipped. A selector that
    cannot be applied is logged and leaves the title as the only content.
    """
    soup = parse_document(body)
    title = extract_title(soup)

    try:
        elements = select_elements(soup, selector)
    except ParseError as exc:
        logger.error("Failed to parse content of %s: %s", page_url, exc)
        return PageContent(title=title)

    candidates: List[ImageCandidate] = []
    for element in elements:
        src = element.get(IMAGE_SOURCE_ATTR)
        if not isinstance(src, str) or not src.strip():
            continue
        src = src.strip()
        try:
            absolute_url = urljoin(page_url, src)
        except ValueError as exc:
            logger.warning("Skipping malformed image source %r on %s: %s", src, page_url, exc)
            continue
        candidates.append(ImageCandidate(src, absolute_url))
    return PageContent(title=title, candidates=tuple(candidates))
