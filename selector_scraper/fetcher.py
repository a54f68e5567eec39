"""Thin HTTP layer over ``requests`` used by every network stage."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import requests

from .config import ScrapeConfig

logger = logging.getLogger("selector_scraper")


class Fetcher:
    """Issue GET and HEAD requests with the run's headers and timeout.

    Each worker thread owns its own instance; the underlying session is
    closed when the fetcher is used as a context manager.
    """

    def __init__(self, config: ScrapeConfig, session: Optional[requests.Session] = None) -> None:
        self.timeout = config.request_timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = config.user_agent

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    @contextmanager
    def get(self, url: str) -> Iterator[requests.Response]:
        """Stream ``url``; the response is closed when the block exits."""
        logger.debug("GET %s", url)
        resp = self.session.get(url, stream=True, timeout=self.timeout)
        try:
            yield resp
        finally:
            resp.close()

    def head(self, url: str) -> requests.Response:
        logger.debug("HEAD %s", url)
        resp = self.session.head(url, allow_redirects=True, timeout=self.timeout)
        resp.close()
        return resp
