"""Tests for harvesting PDF links from the index page."""
import datetime
from unittest.mock import MagicMock

import pytest

from pdf_table_scraper.harvester import (
    get_directory,
    get_pdf_file_paths,
    index_cache_path,
    load_index_page,
    make_full_path,
)

INDEX_HTML = """
<html><body>
<p><a href="pdf/ignored-outside-table.pdf">not in a table</a></p>
<table>
  <thead><tr><th><a href="pdf/header.pdf">header</a></th></tr></thead>
  <tbody>
    <tr><td>April</td><td><a href="2023/April.pdf">April</a> <a href="2023/April-alt.pdf">alt</a></td></tr>
    <tr><td>May</td><td><a href="">missing</a></td></tr>
    <tr><td>June</td><td><a>no href</a></td></tr>
    <tr><td>July</td><td>no link</td></tr>
    <tr><td>August</td><td><a href="https://other.example.com/August.pdf">August</a></td></tr>
    <tr><td>September</td><td><a href="2023/September.pdf">September</a></td></tr>
  </tbody>
</table>
</body></html>
"""


class TestGetPdfFilePaths:

    def test_links_from_table_rows(self):
        assert get_pdf_file_paths(INDEX_HTML) == [
            "2023/April.pdf",
            "https://other.example.com/August.pdf",
            "2023/September.pdf",
        ]

    def test_accepts_bytes(self):
        assert get_pdf_file_paths(INDEX_HTML.encode("utf-8"))[0] == "2023/April.pdf"

    def test_empty_page_raises(self):
        with pytest.raises(ValueError, match="empty"):
            get_pdf_file_paths(b"")

    def test_page_without_tables(self):
        assert get_pdf_file_paths("<html><body><a href='x.pdf'>x</a></body></html>") == []


class TestMakeFullPath:

    def test_relative(self):
        assert make_full_path("https://example.com/kondate/", "2023/April.pdf") == (
            "https://example.com/kondate/2023/April.pdf", False,
        )

    def test_absolute(self):
        url = "https://other.example.com/August.pdf"
        assert make_full_path("https://example.com/kondate/", url) == (url, True)


def test_get_directory():
    assert get_directory("2023/April.pdf") == "2023"
    assert get_directory("April.pdf") == ""


def test_index_cache_path(tmp_path):
    path = index_cache_path(tmp_path, "ryoushoku.html", datetime.date(2026, 10, 18))
    assert path == tmp_path / "ryoushokuOctober.html"


class TestLoadIndexPage:

    def test_uses_cached_copy(self, mock_config):
        today = datetime.date(2026, 4, 1)
        cached = index_cache_path(mock_config.html_dir, mock_config.index_page, today)
        cached.parent.mkdir(parents=True)
        cached.write_bytes(b"<html>cached</html>")
        fetcher = MagicMock()

        assert load_index_page(mock_config, fetcher, today) == b"<html>cached</html>"
        fetcher.download_file.assert_not_called()

    def test_downloads_when_missing(self, mock_config):
        today = datetime.date(2026, 5, 1)
        cached = index_cache_path(mock_config.html_dir, mock_config.index_page, today)

        def download(path, url):
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"<html>fresh</html>")
            return True

        fetcher = MagicMock()
        fetcher.download_file.side_effect = download

        assert load_index_page(mock_config, fetcher, today) == b"<html>fresh</html>"
        fetcher.download_file.assert_called_once_with(
            cached, "https://example.com/kondate/ryoushoku.html",
        )
