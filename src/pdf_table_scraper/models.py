"""
Table dataclasses. Depends only on cell text cleaning.
"""
from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field

from .text_cleaning import normalize_rows


class MalformedTableError(ValueError):
    """Raised when a table is not rectangular.

    This means the layout extractor returned an inconsistent grid. It is
    never caught by the pipeline.
    """


# =============================================================================
# TABLE MODELS
# =============================================================================

@dataclass
class StringTable:
    """The normalized cell strings of one table, row-major."""
    rows: list[list[str]] = field(default_factory=list)

    @classmethod
    def from_grid(
        cls,
        width: int,
        height: int,
        cells: list[list[str | None]],
    ) -> StringTable:
        """Build a table from a raw extractor grid of declared size.

        Rows are allocated from ``width`` and ``height``; cells missing from
        the raw grid stay empty. Cells outside the declared size raise
        ``MalformedTableError``.
        """
        rows = [[""] * width for _ in range(height)]
        for y, row in enumerate(normalize_rows(cells)):
            if y >= height:
                raise MalformedTableError(
                    f"table = {width} x {height} has extra row[{y}]={row!r}"
                )
            if len(row) > width:
                raise MalformedTableError(
                    f"table = {width} x {height} row[{y}]={len(row)} {row!r}"
                )
            for x, cell in enumerate(row):
                rows[y][x] = cell
        return cls(rows=rows)

    @property
    def dimensions(self) -> tuple[int, int]:
        """(width, height). (0, 0) for a table with no rows."""
        if not self.rows:
            return 0, 0
        return len(self.rows[0]), len(self.rows)

    @property
    def width(self) -> int:
        return self.dimensions[0]

    @property
    def height(self) -> int:
        return self.dimensions[1]

    def to_csv(self) -> str:
        """Return the table in CSV format.

        Raises:
            MalformedTableError: if any row differs in length from row 0.
        """
        w, h = self.dimensions
        for y, row in enumerate(self.rows):
            if len(row) != w:
                raise MalformedTableError(
                    f"table = {w} x {h} row[{y}]={len(row)} {row!r}"
                )
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerows(self.rows)
        return buf.getvalue()


@dataclass
class DocumentTables:
    """The tables found on each page of one document.

    Keys are 1-indexed page numbers. A page that was processed but had no
    tables is stored with an empty list.
    """
    page_tables: dict[int, list[StringTable]] = field(default_factory=dict)

    def set_page_tables(self, page_num: int, tables: list[StringTable]) -> None:
        self.page_tables[page_num] = list(tables)

    def page_numbers(self) -> list[int]:
        """Page numbers in ascending order."""
        return sorted(self.page_tables)

    @property
    def num_pages(self) -> int:
        return len(self.page_tables)

    def num_tables(self) -> int:
        return sum(len(tables) for tables in self.page_tables.values())

    def filter(self, width: int, height: int) -> DocumentTables:
        """Return the tables that are at least ``width`` cells wide and
        ``height`` cells high.

        Pages left with no tables are dropped. ``self`` is not modified.
        """
        filtered = DocumentTables()
        for page_num in self.page_numbers():
            kept = [
                table for table in self.page_tables[page_num]
                if table.width >= width and table.height >= height
            ]
            if kept:
                filtered.page_tables[page_num] = kept
        return filtered

    def describe(self, level: int) -> str:
        """Return a description of the tables at verbosity ``level``.

        ::

                                        (level 0)
            %d pages %d tables          (level 1)
               page %d: %d tables       (level 2)
                  table %d: %d x %d     (level 3)
                    contents            (level 4)

        At level 4 each row is printed as a bracketed list. Non-empty cells
        are quoted as JSON strings, so quotes, backslashes and control
        characters are escaped (``\\x07`` prints as ``"\\u0007"``) and other
        Unicode is kept as-is. Empty cells print as nothing.
        """
        if level <= 0 or self.num_tables() == 0:
            return "\n"
        lines = [f"{self.num_pages} pages {self.num_tables()} tables"]
        if level >= 2:
            for page_num in self.page_numbers():
                lines.extend(self._describe_page(page_num, level))
        return "\n".join(lines) + "\n"

    def _describe_page(self, page_num: int, level: int) -> list[str]:
        tables = self.page_tables[page_num]
        if not tables:
            return []
        lines = [f"   page {page_num}: {len(tables)} tables"]
        if level <= 2:
            return lines
        for i, table in enumerate(tables, start=1):
            w, h = table.dimensions
            lines.append(f"      table {i}: {w} x {h}")
            if level <= 3:
                continue
            for row in table.rows:
                cells = [json.dumps(cell, ensure_ascii=False) if cell else "" for cell in row]
                lines.append(f"        [{', '.join(cells)}]")
        return lines

    def __str__(self) -> str:
        return self.describe(1)
