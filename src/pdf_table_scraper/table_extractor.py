"""Table extraction from PDF pages using PyMuPDF."""
from __future__ import annotations

import logging
from pathlib import Path

import pymupdf

from .config import TRACE
from .models import DocumentTables, MalformedTableError, StringTable

logger = logging.getLogger(__name__)

STRATEGIES = ("auto", "lines", "text")

# Defaults span every page of any realistic document
DEFAULT_FIRST_PAGE = -1
DEFAULT_LAST_PAGE = 10000


class ExtractionError(Exception):
    """Raised when tables cannot be extracted from a document."""

    def __init__(self, message: str, pdf_path: Path | str):
        super().__init__(message)
        self.pdf_path = pdf_path


class DocumentOpenError(ExtractionError):
    """Raised when a PDF cannot be opened or its page count read."""


class PageExtractionError(ExtractionError):
    """Raised when the layout extractor fails on a page."""

    def __init__(self, message: str, pdf_path: Path | str, page_num: int):
        super().__init__(message, pdf_path)
        self.page_num = page_num


class TableExtractor:
    """Extract tables from PDF pages using PyMuPDF's find_tables().

    Requires PyMuPDF 1.23.0+ for find_tables() support.
    """

    def __init__(self, strategy: str = "auto"):
        """
        Initialize table extractor.

        Args:
            strategy: "lines" for bordered tables, "text" for gridless tables,
                "auto" to try lines first and fall back to text
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown table strategy {strategy!r}. Must be one of {STRATEGIES}")
        self.strategy = strategy

    def extract_tables(
        self,
        pdf_path: Path | str,
        first_page: int = DEFAULT_FIRST_PAGE,
        last_page: int = DEFAULT_LAST_PAGE,
    ) -> DocumentTables:
        """Extract the tables on pages ``first_page`` to ``last_page`` of a PDF.

        The range is inclusive and 1-indexed. ``first_page`` below 1 is
        treated as 1, ``last_page`` past the end as the last page.

        Args:
            pdf_path: Path to PDF file
            first_page: First page to extract
            last_page: Last page to extract

        Returns:
            DocumentTables with an entry for every page in the range

        Raises:
            DocumentOpenError: if the PDF cannot be opened
            PageExtractionError: if extraction fails on any page
        """
        try:
            doc = pymupdf.open(pdf_path)
        except Exception as e:
            raise DocumentOpenError(f"Could not open {str(pdf_path)!r} err={e}", pdf_path) from e

        try:
            num_pages = doc.page_count
            first, last = max(first_page, 1), min(last_page, num_pages)
            if first > last:
                logger.warning(
                    f"No pages to extract from {str(pdf_path)!r}: "
                    f"requested {first_page}-{last_page}, document has {num_pages} pages"
                )

            result = DocumentTables()
            for page_num in range(first, last + 1):
                try:
                    tables = self._extract_page_tables(doc[page_num - 1], page_num)
                except MalformedTableError:
                    raise
                except Exception as e:
                    raise PageExtractionError(
                        f"extract_page_tables failed. pdf_path={str(pdf_path)!r} "
                        f"page_num={page_num} err={e}",
                        pdf_path, page_num,
                    ) from e
                result.set_page_tables(page_num, tables)
        finally:
            doc.close()

        return result

    def _extract_page_tables(self, page: pymupdf.Page, page_num: int) -> list[StringTable]:
        """Extract the tables from (1-indexed) page ``page_num``."""
        found = self._find_tables(page)
        tables = [
            StringTable.from_grid(t.col_count, t.row_count, t.extract())
            for t in found
        ]
        logger.debug(f"Found {len(tables)} tables on page {page_num}")
        for i, table in enumerate(tables):
            logger.log(TRACE, f"page {page_num} table {i + 1}: {table.rows!r}")
        return tables

    def _find_tables(self, page: pymupdf.Page) -> list:
        """Run find_tables() with the configured strategy.

        In "auto" mode the text strategy is only tried when the lines
        strategy finds nothing; snap_tolerance=10 groups gridless text into
        cells.
        """
        if self.strategy in ("auto", "lines"):
            found = page.find_tables(strategy="lines")
            if found.tables or self.strategy == "lines":
                return list(found.tables)
        found = page.find_tables(strategy="text", snap_tolerance=10)
        return list(found.tables)

    @staticmethod
    def is_available() -> bool:
        """Check if table extraction is available (PyMuPDF 1.23+).

        Returns:
            True if find_tables() is available
        """
        try:
            version_parts = pymupdf.version[0].split(".")[:2]
            version = tuple(map(int, version_parts))
            return version >= (1, 23)
        except Exception:
            return False
