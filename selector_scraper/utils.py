"""Helpers that derive on-disk names from URLs."""

from __future__ import annotations

import posixpath
from typing import Tuple
from urllib.parse import urlparse

DEFAULT_FILE_STEM = "index"
DEFAULT_IMAGE_NAME = "image"


def site_folder_name(url: str) -> str:
    """Folder name for a site: ``www.example.com`` becomes ``www-example-com``.

    Credentials are left out; an explicit port is appended.
    """
    parsed = urlparse(url)
    host = parsed.hostname or ""
    try:
        port = parsed.port
    except ValueError:
        port = None
    if port is not None:
        host = f"{host}:{port}"
    return host.replace(".", "-").replace(":", "-")


def result_file_stem(url: str, fallback: str = DEFAULT_FILE_STEM) -> str:
    """File stem for a page: ``/a/b/`` becomes ``a-b``, ``/`` becomes ``fallback``."""
    path = urlparse(url).path
    stem = path[1:] if path.startswith("/") else path
    stem = stem.replace("/", "-").rstrip("-")
    return stem or fallback


def split_image_name(url: str) -> Tuple[str, str]:
    """Split the final path segment of an image URL into base name and extension."""
    name = posixpath.basename(urlparse(url).path)
    base, ext = posixpath.splitext(name)
    return base or DEFAULT_IMAGE_NAME, ext
