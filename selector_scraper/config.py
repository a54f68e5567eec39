"""Configuration objects and constants for the scraper."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import __version__

DEFAULT_RESULTS_DIR = Path("scrape-results")
DEFAULT_OUTPUT_FORMAT = "txt"
OUTPUT_FORMATS = ("txt", "csv", "json", "xml")
DEFAULT_USER_AGENT = f"selector-scraper/{__version__}"


@dataclass(frozen=True)
class ScrapeConfig:
    """Settings shared by every stage of a scrape run."""

    results_dir: Path = DEFAULT_RESULTS_DIR
    output_format: str = DEFAULT_OUTPUT_FORMAT
    download_images: bool = False
    request_timeout: Optional[float] = None
    max_workers: Optional[int] = None
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def file_extension(self) -> str:
        """Extension used for result files; unknown formats write plain text."""
        if self.output_format in OUTPUT_FORMATS:
            return self.output_format
        return DEFAULT_OUTPUT_FORMAT

    def pool_size(self, tasks: int) -> int:
        """Thread count for a stage running ``tasks`` independent jobs."""
        size = max(tasks, 1)
        if self.max_workers:
            size = min(size, self.max_workers)
        return size
