"""Download the index page and the PDFs it links to."""
from __future__ import annotations

import datetime
import logging
from pathlib import Path

import httpx
from tqdm import tqdm

from .config import Config
from .harvester import get_directory, get_pdf_file_paths, load_index_page, make_full_path
from .paths import make_dir

logger = logging.getLogger(__name__)


class Fetcher:
    """Downloads URLs to local files, one attempt each.

    A destination that already exists is assumed complete and skipped.
    Bodies are written to a ``.part`` file first and renamed into place, so
    an interrupted download is never mistaken for a finished one.
    """

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        """
        Args:
            timeout: Seconds before a request is abandoned
            client: httpx client to use; one is created if None
        """
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def download_file(self, path: Path | str, url: str) -> bool:
        """Download *url* to *path*.

        Returns:
            True if downloaded, False if *path* already existed

        Raises:
            httpx.HTTPError: on connection failure or non-2xx status
        """
        path = Path(path)
        if path.exists():
            logger.debug(f"Already downloaded: {path}")
            return False

        path.parent.mkdir(parents=True, exist_ok=True)
        part_path = path.with_name(path.name + ".part")
        try:
            with self.client.stream("GET", url) as resp:
                resp.raise_for_status()
                with open(part_path, "wb") as f:
                    for chunk in resp.iter_bytes():
                        f.write(chunk)
        except BaseException:
            part_path.unlink(missing_ok=True)
            raise
        part_path.replace(path)
        logger.debug(f"Downloaded {url} -> {path}")
        return True


def local_pdf_path(pdf_dir: Path | str, link: str) -> Path:
    """Where the PDF at relative *link* is stored under *pdf_dir*.

    A leading ``/`` is dropped, so root-relative links land under *pdf_dir*
    too.

    Raises:
        ValueError: if *link* resolves to a path outside *pdf_dir*.
    """
    pdf_dir = Path(pdf_dir)
    dest = pdf_dir / link.lstrip("/")
    if not dest.resolve().is_relative_to(pdf_dir.resolve()):
        raise ValueError(f"link {link!r} points outside {str(pdf_dir)!r}")
    return dest


def download_documents(
    config: Config,
    fetcher: Fetcher | None = None,
    today: datetime.date | None = None,
) -> list[Path]:
    """Download every PDF linked from the index page.

    Absolute links point off-site and are skipped. Each link's first
    directory (usually the year) is created under ``config.pdf_dir``.

    Returns:
        Local paths of the linked PDFs, in link order

    Raises:
        ValueError: if a link points outside ``config.pdf_dir``
    """
    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = Fetcher(timeout=config.http_timeout)

    try:
        html = load_index_page(config, fetcher, today)
        links = get_pdf_file_paths(html)
        logger.info(f"Found {len(links)} PDF links")

        local_paths = []
        for link in tqdm(links, desc="Downloading"):
            rel = link.lstrip("/")
            url, is_absolute = make_full_path(config.index_url, rel)
            if is_absolute:
                logger.info(f"Skipping absolute link {link}")
                continue
            dest = local_pdf_path(config.pdf_dir, link)
            sub_dir = get_directory(rel)
            if sub_dir:
                make_dir("PDF directory", config.pdf_dir / sub_dir)
            fetcher.download_file(dest, url)
            local_paths.append(dest)
    finally:
        if owns_fetcher:
            fetcher.close()

    return local_paths
