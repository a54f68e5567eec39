"""Exceptions raised by the scraper pipeline.

Transport failures are reported as :class:`requests.RequestException` and
filesystem failures as :class:`OSError`; the classes below cover the
failures the scraper itself detects.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base class for scraper errors."""


class InputError(ScrapeError, ValueError):
    """A scrape target could not be parsed or its URL is not absolute."""


class ParseError(ScrapeError):
    """A fetched document could not be queried with the given selector."""

    def __init__(self, selector: str, message: str) -> None:
        self.selector = selector
        super().__init__(f"{message} (selector={selector!r})")
