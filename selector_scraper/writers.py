"""Serialization of scrape results to the supported output formats."""

from __future__ import annotations

import csv
import io
import json
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from .config import DEFAULT_OUTPUT_FORMAT, ScrapeConfig
from .models import ScrapeResult
from .utils import result_file_stem, site_folder_name

logger = logging.getLogger("selector_scraper")

CSV_HEADER = ["Title", "URL", "Selector", "Image URLs"]
XML_ROOT_TAG = "ScrapeResult"


def render_text(result: ScrapeResult) -> str:
    lines = [
        f"Title: {result.title}",
        "",
        f"URL: {result.url}",
        "",
        f"Selector: {result.selector}",
        "",
        "Image URLs:",
        "",
    ]
    lines.extend(f"- {url}" for url in result.img_urls)
    return "\n".join(lines) + "\n"


def render_json(result: ScrapeResult) -> str:
    return json.dumps(result.to_dict(), indent=1, ensure_ascii=False) + "\n"


def render_csv(result: ScrapeResult) -> str:
    """One row per image URL with the result fields repeated on each row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for url in result.img_urls:
        writer.writerow([result.title, result.url, result.selector, url])
    return buffer.getvalue()


def render_xml(result: ScrapeResult) -> str:
    root = ET.Element(XML_ROOT_TAG)
    ET.SubElement(root, "title").text = result.title
    ET.SubElement(root, "url").text = result.url
    ET.SubElement(root, "selector").text = result.selector
    img_urls = ET.SubElement(root, "imgUrls")
    for url in result.img_urls:
        ET.SubElement(img_urls, "imgUrl").text = url
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode") + "\n"


SERIALIZERS: Dict[str, Callable[[ScrapeResult], str]] = {
    "txt": render_text,
    "json": render_json,
    "csv": render_csv,
    "xml": render_xml,
}


def serialize_result(result: ScrapeResult, output_format: str) -> str:
    """Render ``result``; unknown formats fall back to plain text."""
    serializer = SERIALIZERS.get(output_format, SERIALIZERS[DEFAULT_OUTPUT_FORMAT])
    return serializer(result)


def result_paths(result: ScrapeResult, config: ScrapeConfig) -> Tuple[Path, Path]:
    """Return ``(result_file, image_dir)`` for ``result`` under the results directory."""
    site_dir = config.results_dir / site_folder_name(result.url)
    stem = result_file_stem(result.url)
    return site_dir / f"{stem}.{config.file_extension}", site_dir / stem


def persist_result(result: ScrapeResult, config: ScrapeConfig) -> Optional[Path]:
    """Write ``result`` to its per-site file, replacing any previous content."""
    file_path, _ = result_paths(result, config)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Failed to create site directory %s: %s", file_path.parent, exc)
        return None

    payload = serialize_result(result, config.output_format)
    try:
        with open(file_path, "w", encoding="utf-8", newline="") as handle:
            handle.write(payload)
    except OSError as exc:
        logger.error("Failed to write %s: %s", file_path, exc)
        return None
    logger.info("Saved scrape result to %s", file_path)
    return file_path


def load_result(path: Path) -> ScrapeResult:
    """Decode a json or xml result file back into a :class:`ScrapeResult`."""
    suffix = path.suffix.lstrip(".")
    if suffix == "json":
        with open(path, encoding="utf-8") as handle:
            return ScrapeResult.from_dict(json.load(handle))
    if suffix == "xml":
        root = ET.parse(path).getroot()
        return ScrapeResult(
            title=root.findtext("title") or "",
            url=root.findtext("url") or "",
            selector=root.findtext("selector") or "",
            img_urls=tuple(node.text or "" for node in root.iterfind("imgUrls/imgUrl")),
        )
    raise ValueError(f"Cannot load results from {path}: unsupported format")
