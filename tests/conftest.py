"""
Shared pytest fixtures for pdf-table-scraper tests.

All fixtures that need to be shared across test modules should be defined here.
"""
from __future__ import annotations

from pathlib import Path

import pymupdf
import pytest

from pdf_table_scraper.config import Config
from pdf_table_scraper.models import DocumentTables, StringTable


# =============================================================================
# PDF builders
# =============================================================================

SAMPLE_TABLE = [
    ["Name", "Value", "Category"],
    ["Alpha", "100", "Type A"],
    ["Beta", "200", "Type B"],
    ["Gamma", "300", "Type C"],
]


def draw_table(page: pymupdf.Page, rows: list[list[str]], x: float = 72, y: float = 140) -> None:
    """Draw a ruled table with one text line per cell."""
    col_width = 100
    row_height = 20
    num_rows = len(rows)
    num_cols = len(rows[0])

    for row in range(num_rows + 1):
        yy = y + row * row_height
        page.draw_line((x, yy), (x + col_width * num_cols, yy))
    for col in range(num_cols + 1):
        xx = x + col * col_width
        page.draw_line((xx, y), (xx, y + num_rows * row_height))

    for row_idx, row_data in enumerate(rows):
        for col_idx, cell in enumerate(row_data):
            page.insert_text(
                (x + col_idx * col_width + 5, y + row_idx * row_height + 15),
                cell, fontsize=10,
            )


def create_pdf(path: Path, pages: list[list[list[list[str]]]]) -> Path:
    """Create a PDF at *path*. ``pages[i]`` is the list of tables on page i+1."""
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = pymupdf.open()
    for tables in pages:
        page = doc.new_page()
        page.insert_text((72, 72), "Dormitory Menu", fontsize=16)
        for i, rows in enumerate(tables):
            draw_table(page, rows, y=140 + i * 200)
    doc.save(str(path))
    doc.close()
    return path


# =============================================================================
# PDF fixtures
# =============================================================================

@pytest.fixture
def table_pdf(tmp_path: Path) -> Path:
    """Three page PDF laid out as PDF/<year>/<month>.pdf with a table on page 2."""
    return create_pdf(
        tmp_path / "PDF" / "2023" / "April.pdf",
        [[], [SAMPLE_TABLE], []],
    )


# =============================================================================
# Model fixtures
# =============================================================================

@pytest.fixture
def three_page_tables() -> DocumentTables:
    """Pages 1 and 3 empty, page 2 with a 4 x 3 and a 1 x 1 table."""
    tables = DocumentTables()
    tables.set_page_tables(1, [])
    tables.set_page_tables(2, [
        StringTable([
            ["a", "b", "c", "d"],
            ["e", "f", "g", "h"],
            ["i", "j", "k", "l"],
        ]),
        StringTable([["x"]]),
    ])
    tables.set_page_tables(3, [])
    return tables


# =============================================================================
# Config fixtures
# =============================================================================

@pytest.fixture
def mock_config(tmp_path: Path) -> Config:
    """Create a test configuration rooted in tmp_path."""
    return Config(
        csv_dir=tmp_path / "outcsv",
        html_dir=tmp_path / "html",
        pdf_dir=tmp_path / "PDF",
        profile_path=tmp_path / "cpu.profile",
        index_url="https://example.com/kondate/",
        home_dir=tmp_path,
    )
