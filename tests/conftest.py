"""Shared fixtures: a local test website and scraper configuration."""

from __future__ import annotations

import asyncio
import socket
import threading
from collections.abc import Generator
from contextlib import closing
from pathlib import Path

import pytest
from aiohttp import web

from selector_scraper.config import ScrapeConfig
from tests.mock_site import create_app


def find_free_port() -> int:
    """Find a free port on localhost."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class AioHttpTestServer:
    """Wrapper to run an aiohttp app in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        if not self._ready.wait(timeout=5.0):
            raise RuntimeError("Test server did not start")

    def _run_server(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._ready.set()
        self._loop.run_forever()

    def stop(self) -> None:
        if self._loop and self._runner:
            runner = self._runner
            future = asyncio.run_coroutine_threadsafe(runner.cleanup(), self._loop)
            future.result(timeout=2.0)
        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)
        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture(scope="session")
def site_server() -> Generator[AioHttpTestServer, None, None]:
    server = AioHttpTestServer(create_app(), find_free_port())
    server.start()
    yield server
    server.stop()


@pytest.fixture
def site_url(site_server: AioHttpTestServer) -> str:
    """Base URL of the test website, e.g. ``http://127.0.0.1:8080``."""
    return site_server.url


@pytest.fixture
def unreachable_url() -> str:
    """A URL on a local port nothing is listening on."""
    return f"http://127.0.0.1:{find_free_port()}/"


@pytest.fixture
def config(tmp_path: Path) -> ScrapeConfig:
    return ScrapeConfig(results_dir=tmp_path / "scrape-results", request_timeout=5.0)

