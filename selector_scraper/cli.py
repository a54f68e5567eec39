"""Command-line entry point for the selector scraper."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Sequence

from .config import DEFAULT_RESULTS_DIR, DEFAULT_USER_AGENT, OUTPUT_FORMATS, ScrapeConfig
from .crawler import run_scraper
from .models import ScrapeTarget
from .targets import collect_targets_interactively, read_targets

logger = logging.getLogger("selector_scraper.cli")


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value}")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value}")
    return number


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Scrape elements matching a CSS selector from one or more websites, "
            "validate the images they reference and save one result per site."
        ),
    )
    parser.add_argument(
        "--output-file-format",
        choices=OUTPUT_FORMATS,
        default="txt",
        help="Scraped results file format (default: txt)",
    )
    parser.add_argument(
        "--download",
        "--download-images",
        dest="download_images",
        action="store_true",
        help="Download the scraped images next to each result file",
    )
    parser.add_argument(
        "--results-dir",
        type=Path,
        default=DEFAULT_RESULTS_DIR,
        help="Directory where scrape results are written (default: %(default)s)",
    )
    parser.add_argument(
        "--targets-file",
        type=Path,
        help="Read 'url,selector' lines from this file instead of prompting",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Per-request timeout in seconds (default: no timeout)",
    )
    parser.add_argument(
        "--max-workers",
        type=_positive_int,
        default=None,
        help="Cap the number of threads used by each stage (default: one per task)",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent header sent with every request",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def _load_targets(args: argparse.Namespace) -> List[ScrapeTarget]:
    if args.targets_file is None:
        return collect_targets_interactively(sys.stdin, sys.stdout)
    with open(args.targets_file, encoding="utf-8") as handle:
        return read_targets(handle)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(threadName)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = ScrapeConfig(
        results_dir=args.results_dir,
        output_format=args.output_file_format,
        download_images=args.download_images,
        request_timeout=args.timeout,
        max_workers=args.max_workers,
        user_agent=args.user_agent,
    )

    try:
        targets = _load_targets(args)
    except KeyboardInterrupt:
        logger.info("Stopping the scraper...")
        return 130
    except OSError as exc:
        logger.error("Failed to read targets from %s: %s", args.targets_file, exc)
        return 1
    if not targets:
        logger.warning("No targets to scrape")
        return 0

    overall_start = time.perf_counter()
    try:
        summary = run_scraper(targets, config)
    except OSError:
        return 1
    total_elapsed = time.perf_counter() - overall_start

    successes = len(summary.results)
    failed = summary.failed_targets
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        successes,
        len(targets),
        len(failed),
    )
    for target in failed:
        logger.warning("No result for %s", target.url)
    if config.download_images:
        logger.info("Downloaded %d images", len(summary.downloaded_images))
    return 0


if __name__ == "__main__":
    sys.exit(main())
