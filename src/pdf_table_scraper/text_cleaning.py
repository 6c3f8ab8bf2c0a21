"""Cell text cleaning.

Applies NFKC normalization and whitespace collapsing to every cell that
comes out of the layout extractor, so the CSV output is stable across the
different ways PDFs encode the same glyphs (ligatures, full-width digits,
non-breaking spaces).
"""
from __future__ import annotations

import re
import unicodedata

# Any run of whitespace, ASCII or Unicode
_WHITESPACE_RE = re.compile(r"\s+")


def reduce_spaces(text: str) -> str:
    """Return *text* with runs of whitespace (spaces, tabs, line breaks,
    etc.) reduced to a single space and the ends trimmed."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize(text: str | None) -> str:
    """Return *text* NFKC-normalized with ``reduce_spaces`` applied.

    ``None`` (PyMuPDF's value for an empty cell) becomes ``""``.
    """
    if not text:
        return ""
    return reduce_spaces(unicodedata.normalize("NFKC", text))


def normalize_rows(rows: list[list[str | None]]) -> list[list[str]]:
    """Return a new grid with ``normalize`` applied to every cell."""
    return [[normalize(cell) for cell in row] for row in rows]
