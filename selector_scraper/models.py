"""Data models used throughout the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple
from urllib.parse import urlparse

from .errors import InputError


@dataclass(frozen=True)
class ScrapeTarget:
    """A page URL paired with the selector to extract from it."""

    url: str
    selector: str

    @classmethod
    def create(cls, url: str, selector: str) -> "ScrapeTarget":
        """Build a target, rejecting URLs without a scheme or host."""
        url = url.strip()
        selector = selector.strip()
        try:
            parsed = urlparse(url)
        except ValueError as exc:
            raise InputError(f"Malformed URL {url!r}: {exc}") from exc
        if not parsed.scheme or not parsed.netloc:
            raise InputError(f"Not an absolute URL: {url!r}")
        if not selector:
            raise InputError(f"Missing selector for {url}")
        return cls(url=url, selector=selector)


@dataclass(frozen=True)
class ImageCandidate:
    """Raw image reference discovered on a matched element."""

    original_src: str
    absolute_url: str


@dataclass(frozen=True)
class PageContent:
    """Title and image candidates extracted from a fetched page."""

    title: str
    candidates: Tuple[ImageCandidate, ...] = ()


@dataclass(frozen=True)
class ScrapeResult:
    """Outcome of scraping a single target."""

    title: str
    url: str
    selector: str
    img_urls: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "selector": self.selector,
            "img_urls": list(self.img_urls),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrapeResult":
        return cls(
            title=data.get("title") or "",
            url=data["url"],
            selector=data["selector"],
            img_urls=tuple(data.get("img_urls") or ()),
        )


@dataclass
class RunSummary:
    """What a scrape run produced, including targets that yielded nothing."""

    targets: List[ScrapeTarget]
    results: List[ScrapeResult] = field(default_factory=list)
    written_files: List[Path] = field(default_factory=list)
    downloaded_images: List[Path] = field(default_factory=list)

    @property
    def failed_targets(self) -> List[ScrapeTarget]:
        succeeded = {(result.url, result.selector) for result in self.results}
        return [
            target
            for target in self.targets
            if (target.url, target.selector) not in succeeded
        ]
