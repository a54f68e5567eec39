"""Parsing of ``url,selector`` / ``url selector`` target lines."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, TextIO

from .errors import InputError
from .models import ScrapeTarget

logger = logging.getLogger("selector_scraper")

START_COMMAND = "start"
EXIT_COMMAND = "exit"

PROMPT_INTRO = (
    "enter the website url and its corresponding html selector separated by a comma "
    "to scrape content from (one per line)\n"
    "example: https://www.example.com,div.product-image img\n"
    f"to start scraping type '{START_COMMAND}'. to exit type '{EXIT_COMMAND}' or press 'ctrl + c'"
)
PROMPT = "website url and html selector: "

_WHITESPACE = re.compile(r"\s+")


def parse_target(line: str) -> ScrapeTarget:
    """Parse ``url,selector`` or ``url selector`` into a :class:`ScrapeTarget`.

    A comma takes precedence; otherwise the first run of whitespace splits
    the URL from the selector. The selector itself may contain spaces.
    """
    line = line.strip()
    if "," in line:
        url, selector = line.split(",", 1)
    else:
        parts = _WHITESPACE.split(line, maxsplit=1)
        if len(parts) != 2:
            raise InputError(f"Expected 'url,selector' but got {line!r}")
        url, selector = parts
    return ScrapeTarget.create(url, selector)


def read_targets(lines: Iterable[str]) -> List[ScrapeTarget]:
    """Parse target lines, skipping blanks, ``#`` comments and invalid entries.

    Later lines for the same URL replace earlier ones.
    """
    targets: Dict[str, ScrapeTarget] = {}
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            target = parse_target(line)
        except InputError as exc:
            logger.error("Skipping line %d: %s", lineno, exc)
            continue
        targets[target.url] = target
    return list(targets.values())


def collect_targets_interactively(stdin: TextIO, stdout: TextIO) -> List[ScrapeTarget]:
    """Prompt for targets until ``start``; ``exit`` terminates the process.

    End of input behaves like ``start``.
    """
    stdout.write(PROMPT_INTRO + "\n")
    targets: Dict[str, ScrapeTarget] = {}
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        entry = line.strip()
        if entry == EXIT_COMMAND:
            logger.info("Stopping the scraper...")
            raise SystemExit(0)
        if entry == START_COMMAND:
            break
        if not entry:
            continue
        try:
            target = parse_target(entry)
        except InputError as exc:
            logger.error("Invalid target: %s", exc)
            continue
        targets[target.url] = target

    logger.info("Starting the scraper with %d target(s)...", len(targets))
    return list(targets.values())
