"""Harvest PDF links from the index page."""
from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

if TYPE_CHECKING:
    from .config import Config
    from .fetcher import Fetcher

logger = logging.getLogger(__name__)


def get_pdf_file_paths(html: bytes | str) -> list[str]:
    """Return the link targets found in the rows of the page's tables.

    Only the first anchor of each ``tbody > tr`` row is used. Rows without
    an anchor, or whose anchor has a missing or empty ``href``, are skipped.

    Raises:
        ValueError: if *html* is empty.
    """
    if not html:
        raise ValueError("index page is empty")
    soup = BeautifulSoup(html, "html.parser")
    links = []
    for row in soup.select("tbody > tr"):
        anchor = row.find("a")
        if anchor is None:
            continue
        href = anchor.get("href")
        if href:
            links.append(href)
    logger.debug(f"Found {len(links)} links")
    return links


def make_full_path(base_url: str, path: str) -> tuple[str, bool]:
    """Resolve *path* against *base_url*.

    Returns:
        (url, is_absolute). Absolute links are returned unchanged.
    """
    if "://" in path:
        return path, True
    return base_url + path, False


def get_directory(path: str) -> str:
    """First ``/``-separated segment of *path*, or ``""`` for a bare file name."""
    head, sep, _ = path.partition("/")
    return head if sep else ""


def index_cache_path(html_dir: Path | str, page_name: str, today: datetime.date) -> Path:
    """Where this month's copy of the index page is kept.

    ``ryoushoku.html`` in October becomes ``<html_dir>/ryoushokuOctober.html``.
    """
    stem = Path(page_name).stem
    return Path(html_dir) / f"{stem}{today.strftime('%B')}.html"


def load_index_page(
    config: Config,
    fetcher: Fetcher,
    today: datetime.date | None = None,
) -> bytes:
    """Return this month's index page, downloading it if not cached."""
    if today is None:
        today = datetime.date.today()
    cache_path = index_cache_path(config.html_dir, config.index_page, today)
    if not cache_path.exists():
        logger.info("Downloading index page...")
        fetcher.download_file(cache_path, config.index_url + config.index_page)
    return cache_path.read_bytes()
