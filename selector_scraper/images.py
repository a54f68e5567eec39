"""Image validation and downloading utilities."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

import requests
from filetype import guess

from .config import ScrapeConfig
from .fetcher import Fetcher
from .models import ScrapeResult
from .utils import split_image_name

logger = logging.getLogger("selector_scraper")

CONTENT_TYPE_EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/gif": ".gif"}
ALLOWED_CONTENT_TYPES = frozenset(CONTENT_TYPE_EXTENSIONS)


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


def validate_image(fetcher: Fetcher, url: str) -> bool:
    """Check with a HEAD request that ``url`` serves an allow-listed image."""
    try:
        resp = fetcher.head(url)
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Failed to check image %s: %s", url, exc)
        return False

    if not is_success_status(resp.status_code):
        logger.warning("Rejected image %s: HTTP %s", url, resp.status_code)
        return False

    content_type = resp.headers.get("Content-Type", "")
    if content_type not in ALLOWED_CONTENT_TYPES:
        logger.warning(
            "Rejected image %s: not an image (Content-Type=%s)",
            url,
            content_type or "<missing>",
        )
        return False
    return True


def sniff_extension(data: bytes, content_type: Optional[str]) -> str:
    """Extension for a downloaded image whose URL does not name one.

    The file signature decides; otherwise the declared type must be one of
    the allow-listed types. Unrecognised data is saved without an extension.
    """
    kind = guess(data)
    if kind is not None and kind.mime.startswith("image/"):
        return CONTENT_TYPE_EXTENSIONS.get(kind.mime, f".{kind.extension}")
    return CONTENT_TYPE_EXTENSIONS.get(content_type or "", "")


def download_image(fetcher: Fetcher, url: str, image_dir: Path) -> Optional[Path]:
    """Fetch one image into ``image_dir``; failures only affect this image."""
    base, ext = split_image_name(url)
    try:
        with fetcher.get(url) as resp:
            if not is_success_status(resp.status_code):
                logger.warning("Failed to download image %s: HTTP %s", url, resp.status_code)
                return None
            data = resp.content
            content_type = resp.headers.get("Content-Type")
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Failed to download image %s: %s", url, exc)
        return None

    if not ext:
        ext = sniff_extension(data, content_type)

    destination = image_dir / f"{base}{ext}"
    try:
        destination.write_bytes(data)
    except OSError as exc:
        logger.warning("Failed to write image %s: %s", destination, exc)
        return None
    return destination


def _download_with_own_session(url: str, image_dir: Path, config: ScrapeConfig) -> Optional[Path]:
    with Fetcher(config) as fetcher:
        return download_image(fetcher, url, image_dir)


def download_images(result: ScrapeResult, image_dir: Path, config: ScrapeConfig) -> List[Path]:
    """Download every confirmed image of ``result`` concurrently.

    Returns the written paths once all downloads have finished.
    """
    if not result.img_urls:
        return []
    try:
        image_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Failed to create image directory %s: %s", image_dir, exc)
        return []

    with ThreadPoolExecutor(
        max_workers=config.pool_size(len(result.img_urls)),
        thread_name_prefix="image",
    ) as pool:
        futures = [
            pool.submit(_download_with_own_session, url, image_dir, config)
            for url in result.img_urls
        ]
        paths = [future.result() for future in futures]

    saved = [path for path in paths if path is not None]
    logger.info("Saved %d/%d images to %s", len(saved), len(result.img_urls), image_dir)
    return saved
