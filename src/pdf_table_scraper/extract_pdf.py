"""Batch extraction pipeline orchestration.

Pipeline: glob patterns -> PDFs -> DocumentTables -> filter -> CSV files

Output layout::

    <csv_dir>/<year>/<month>/<pdf stem>.page<N>.table<M>.csv
"""
from __future__ import annotations

import cProfile
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from .config import Config
from .models import DocumentTables
from .paths import (
    change_dir_ext,
    csv_path,
    csv_sub_dir,
    file_size_mb,
    make_dir,
    patterns_to_paths,
)
from .table_extractor import ExtractionError, TableExtractor

logger = logging.getLogger(__name__)


class OutputWriteError(Exception):
    """Raised when a CSV file cannot be written."""

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


@dataclass
class ExtractionResult:
    """Outcome of extracting a single document."""
    pdf_path: Path
    status: str          # "extracted", "failed"
    num_pages: int = 0   # Pages processed, before filtering
    num_tables: int = 0  # Tables kept after filtering
    duration: float = 0.0
    csv_paths: list[Path] = field(default_factory=list)
    reason: str = ""


def save_csv_files(tables: DocumentTables, csv_root: Path) -> list[Path]:
    """Write each table in *tables* to ``<csv_root>.page<N>.table<M>.csv``.

    Raises:
        OutputWriteError: naming the first path that could not be written.
    """
    written = []
    for page_num in tables.page_numbers():
        for i, table in enumerate(tables.page_tables[page_num]):
            path = csv_path(csv_root, page_num, i)
            contents = table.to_csv()
            try:
                path.write_text(contents, encoding="utf-8", newline="")
            except OSError as e:
                raise OutputWriteError(f"failed to write csv_path={str(path)!r} err={e}", path) from e
            written.append(path)
    return written


def extract_pdf(
    patterns: list[str],
    config: Config,
    extractor: TableExtractor | None = None,
) -> list[ExtractionResult]:
    """Extract tables from the PDFs matching *patterns* and save them as CSV.

    Args:
        patterns: Glob patterns for the input PDFs
        config: Extraction settings
        extractor: Table extractor to use; built from config if None

    Returns:
        One ExtractionResult per input PDF, in processing order

    Raises:
        ExtractionError: if a document fails and continue_on_error is off
        OutputWriteError: if a CSV file cannot be written
        MalformedTableError: if the layout extractor returned a ragged table
    """
    if extractor is None:
        extractor = TableExtractor(strategy=config.table_strategy)

    make_dir("CSV directory", config.csv_dir)

    pdf_paths = patterns_to_paths(patterns, config.home_dir)
    logger.info(f"{len(pdf_paths)} PDF files")

    if not config.do_profile:
        return _extract_all(pdf_paths, config, extractor)

    profiler = cProfile.Profile()
    profiler.enable()
    try:
        return _extract_all(pdf_paths, config, extractor)
    finally:
        profiler.disable()
        profiler.dump_stats(str(config.profile_path))
        logger.info(f"CPU profile written to {config.profile_path}")


def _extract_all(
    pdf_paths: list[Path],
    config: Config,
    extractor: TableExtractor,
) -> list[ExtractionResult]:
    results: list[ExtractionResult] = []
    for i, pdf_path in enumerate(pdf_paths):
        try:
            result = _extract_one(i, len(pdf_paths), pdf_path, config, extractor)
        except ExtractionError as e:
            if not config.continue_on_error:
                raise
            logger.error(f"Failed to extract {str(pdf_path)!r}: {type(e).__name__}: {e}")
            result = ExtractionResult(pdf_path, "failed", reason=f"{type(e).__name__}: {e}")
        results.append(result)
    return results


def _extract_one(
    i: int,
    total: int,
    pdf_path: Path,
    config: Config,
    extractor: TableExtractor,
) -> ExtractionResult:
    t0 = time.perf_counter()
    tables = extractor.extract_tables(pdf_path, config.first_page, config.last_page)
    duration = time.perf_counter() - t0

    num_pages = tables.num_pages
    tables = tables.filter(config.min_width, config.min_height)
    logger.info(
        "%3d of %d: %4.1f MB %3d pages %4.1f sec %r %s",
        i + 1, total, file_size_mb(pdf_path), num_pages, duration,
        str(pdf_path), tables.describe(config.verbose),
    )

    sub_dir = csv_sub_dir(config.csv_dir, pdf_path, config.year_segment)
    make_dir("CSV sub directory", sub_dir)
    csv_root = change_dir_ext(sub_dir, pdf_path.name)
    logger.debug(f"csv_root={csv_root}")
    csv_paths = save_csv_files(tables, csv_root)

    return ExtractionResult(
        pdf_path, "extracted",
        num_pages=num_pages,
        num_tables=tables.num_tables(),
        duration=duration,
        csv_paths=csv_paths,
    )
