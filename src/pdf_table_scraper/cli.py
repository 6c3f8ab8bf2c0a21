"""CLI for downloading PDFs and extracting their tables to CSV."""
import argparse
import logging
import sys
from pathlib import Path

import httpx

from .config import Config
from .extract_pdf import OutputWriteError, extract_pdf
from .fetcher import download_documents
from .models import MalformedTableError
from .table_extractor import ExtractionError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-table-scraper",
        description="Download PDFs from an index page and extract their tables to CSV",
    )
    parser.add_argument("--config", type=str, help="Path to config file")
    parser.add_argument("-d", "--debug", action="store_true", help="Print debugging information")
    parser.add_argument("--trace", action="store_true", help="Print detailed debugging information")
    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Extract tables from PDF files to CSV files")
    extract.add_argument("patterns", nargs="+", metavar="PATTERN",
                         help="PDF file glob patterns; supports ** and ~")
    extract.add_argument("-o", "--csv-dir", type=str, help="Output CSV directory (default ./outcsv)")
    extract.add_argument("-f", "--first-page", type=int, help="First page to extract")
    extract.add_argument("-l", "--last-page", type=int, help="Last page to extract")
    extract.add_argument("-x", "--width", type=int, help="Minimum table width in cells")
    extract.add_argument("-y", "--height", type=int, help="Minimum table height in cells")
    extract.add_argument("-v", "--verbose", type=int, choices=range(5), metavar="{0-4}",
                         help="Detail of the per-document table summary")
    extract.add_argument("--strategy", choices=["auto", "lines", "text"],
                         help="PyMuPDF find_tables() strategy")
    extract.add_argument("--continue-on-error", action="store_true",
                         help="Log documents that fail to extract and carry on")
    extract.add_argument("--profile", action="store_true", help="Write a CPU profile")

    fetch = sub.add_parser("fetch", help="Download the PDFs linked from the index page")
    fetch.add_argument("--url", type=str, help="Index page base URL")
    fetch.add_argument("--pdf-dir", type=str, help="Download directory (default PDF)")
    fetch.add_argument("--html-dir", type=str, help="Index page cache directory (default html)")
    fetch.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Override config values from CLI flags that were given."""
    if args.debug:
        config.debug = True
    if args.trace:
        config.trace = True

    if args.command == "extract":
        if args.csv_dir is not None:
            config.csv_dir = Path(args.csv_dir).expanduser()
        if args.first_page is not None:
            config.first_page = args.first_page
        if args.last_page is not None:
            config.last_page = args.last_page
        if args.width is not None:
            config.min_width = args.width
        if args.height is not None:
            config.min_height = args.height
        if args.verbose is not None:
            config.verbose = args.verbose
        if args.strategy is not None:
            config.table_strategy = args.strategy
        if args.continue_on_error:
            config.continue_on_error = True
        if args.profile:
            config.do_profile = True
    else:
        if args.url is not None:
            config.index_url = args.url
        if args.pdf_dir is not None:
            config.pdf_dir = Path(args.pdf_dir)
        if args.html_dir is not None:
            config.html_dir = Path(args.html_dir)
        if args.timeout is not None:
            config.http_timeout = args.timeout
    return config


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = apply_overrides(Config.load(args.config), args)
    except (OSError, ValueError) as e:
        logging.basicConfig(format="%(asctime)s - %(levelname)s - %(message)s")
        logger.error(f"Could not load config: {type(e).__name__}: {e}")
        return 1

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    errors = config.validate()
    if errors:
        for e in errors:
            logging.error(e)
        return 1

    try:
        if args.command == "extract":
            results = extract_pdf(args.patterns, config)
            failed = [r for r in results if r.status == "failed"]
            n_files = sum(len(r.csv_paths) for r in results)
            print(f"\n{len(results)} PDF files, {n_files} CSV files written to {config.csv_dir}")
            if failed:
                print(f"Failed ({len(failed)}):")
                for r in failed:
                    print(f"  {r.pdf_path}: {r.reason}")
        else:
            paths = download_documents(config)
            print(f"\n{len(paths)} PDF files in {config.pdf_dir}")
    except (ExtractionError, OutputWriteError, MalformedTableError, httpx.HTTPError, OSError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
