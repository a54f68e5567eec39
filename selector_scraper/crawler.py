"""High-level orchestration: scrape targets concurrently and persist the results."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import requests

from .collector import ResultCollector
from .config import ScrapeConfig
from .content import extract_content
from .fetcher import Fetcher
from .images import download_images, is_success_status, validate_image
from .models import RunSummary, ScrapeResult, ScrapeTarget
from .writers import persist_result, result_paths

logger = logging.getLogger("selector_scraper")


@dataclass
class PersistOutcome:
    """Files written while handling one scrape result."""

    result: ScrapeResult
    result_file: Optional[Path]
    images: List[Path] = field(default_factory=list)


def scrape_target(target: ScrapeTarget, config: ScrapeConfig) -> Optional[ScrapeResult]:
    """Fetch a target, extract its content and keep the confirmed images.

    Returns ``None`` when the page cannot be fetched.
    """
    logger.info("Scraping %s", target.url)
    with Fetcher(config) as fetcher:
        try:
            with fetcher.get(target.url) as resp:
                if not is_success_status(resp.status_code):
                    logger.warning("Fetched %s with HTTP %s", target.url, resp.status_code)
                body = resp.content
        except requests.RequestException as exc:
            logger.error("Failed to fetch %s: %s", target.url, exc)
            return None

        content = extract_content(body, target.selector, target.url)
        img_urls = tuple(
            candidate.absolute_url
            for candidate in content.candidates
            if validate_image(fetcher, candidate.absolute_url)
        )

    logger.debug(
        "Extracted %d/%d images from %s",
        len(img_urls),
        len(content.candidates),
        target.url,
    )
    return ScrapeResult(
        title=content.title,
        url=target.url,
        selector=target.selector,
        img_urls=img_urls,
    )


def _scrape_into(target: ScrapeTarget, config: ScrapeConfig, collector: ResultCollector) -> None:
    try:
        result = scrape_target(target, config)
        if result is not None:
            collector.submit(result)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected error scraping %s", target.url)
    finally:
        collector.producer_done()


def process_result(result: ScrapeResult, config: ScrapeConfig) -> PersistOutcome:
    """Persist ``result`` and, when enabled, download its images."""
    result_file = persist_result(result, config)
    outcome = PersistOutcome(result=result, result_file=result_file)
    if result_file is None or not config.download_images:
        return outcome

    _, image_dir = result_paths(result, config)
    outcome.images = download_images(result, image_dir, config)
    return outcome


def _process_safely(result: ScrapeResult, config: ScrapeConfig) -> PersistOutcome:
    try:
        return process_result(result, config)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected error saving results for %s", result.url)
        return PersistOutcome(result=result, result_file=None)


def run_scraper(targets: Sequence[ScrapeTarget], config: ScrapeConfig) -> RunSummary:
    """Scrape every target in parallel and persist each result as it completes.

    Raises :class:`OSError` when the results directory cannot be created.
    """
    summary = RunSummary(targets=list(targets))
    try:
        config.results_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Failed to create results directory %s: %s", config.results_dir, exc)
        raise

    start = time.perf_counter()
    collector = ResultCollector(producers=len(summary.targets))
    pool_size = config.pool_size(len(summary.targets))

    with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="persist") as persist_pool:
        with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="scrape") as scrape_pool:
            for target in summary.targets:
                scrape_pool.submit(_scrape_into, target, config, collector)

            pending = []
            for result in collector:
                summary.results.append(result)
                pending.append(persist_pool.submit(_process_safely, result, config))

        for future in pending:
            outcome = future.result()
            if outcome.result_file is not None:
                summary.written_files.append(outcome.result_file)
            summary.downloaded_images.extend(outcome.images)

    logger.debug("Pipeline drained in %.2fs", time.perf_counter() - start)
    return summary
