"""Fan-in point between the scrape workers and the persistence stage."""

from __future__ import annotations

import queue
import threading
from typing import Iterator

from .models import ScrapeResult

_CLOSED = object()


class ResultCollector:
    """Thread-safe result stream closed by its last producer.

    Every producer calls :meth:`producer_done` exactly once, whether or not
    it submitted a result. A single consumer iterates the collector; results
    arrive in completion order and iteration ends once the stream is closed.
    """

    def __init__(self, producers: int) -> None:
        if producers < 0:
            raise ValueError("producers must be >= 0")
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._pending = producers
        self._closed = False
        if producers == 0:
            self._close()

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def submit(self, result: ScrapeResult) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Result collector is already closed")
            self._queue.put(result)

    def producer_done(self) -> None:
        with self._lock:
            if self._pending <= 0:
                raise RuntimeError("More producers finished than were registered")
            self._pending -= 1
            if self._pending == 0:
                self._close()

    def _close(self) -> None:
        self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[ScrapeResult]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]
