"""Configuration management."""
from dataclasses import dataclass, field
from pathlib import Path
import json
import logging
import os

# Log level below DEBUG for raw cell dumps
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

DEFAULT_CONFIG_PATH = "~/.config/pdf-table-scraper/config.json"
DEFAULT_INDEX_URL = "https://www.off.niihama-nct.ac.jp/gakuryo-a/kondate/"


@dataclass
class Config:
    """Application configuration.

    Built once at startup and passed down; nothing reads settings from
    module globals.
    """
    # Extraction settings
    csv_dir: Path = Path("./outcsv")
    first_page: int = -1        # Clamped up to 1
    last_page: int = 10000      # Clamped down to the page count
    min_width: int = 0          # 0 disables the width filter
    min_height: int = 0         # 0 disables the height filter
    verbose: int = 1            # describe() level for the per-document summary, 0-4
    table_strategy: str = "auto"  # "auto", "lines" or "text"
    year_segment: int = 1       # Path segment used as the year directory
    continue_on_error: bool = False
    # Logging and profiling
    debug: bool = False
    trace: bool = False
    do_profile: bool = False
    profile_path: Path = Path("cpu.profile")
    # Download settings
    index_url: str = DEFAULT_INDEX_URL
    index_page: str = "ryoushoku.html"
    html_dir: Path = Path("html")
    pdf_dir: Path = Path("PDF")
    http_timeout: float = 30.0
    # Resolved once at load, used for "~" in input patterns
    home_dir: Path = field(default_factory=Path.home)

    @property
    def log_level(self) -> int:
        if self.trace:
            return TRACE
        if self.debug:
            return logging.DEBUG
        return logging.INFO

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        """Load config from file and/or environment."""
        if path is not None:
            config_path = Path(path).expanduser()
        else:
            config_path = Path(DEFAULT_CONFIG_PATH).expanduser()

        data = {}
        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)

        return cls(
            csv_dir=Path(
                os.environ.get("PDF_TABLE_SCRAPER_CSV_DIR") or data.get("csv_dir", "./outcsv")
            ).expanduser(),
            first_page=data.get("first_page", -1),
            last_page=data.get("last_page", 10000),
            min_width=data.get("min_width", 0),
            min_height=data.get("min_height", 0),
            verbose=data.get("verbose", 1),
            table_strategy=data.get("table_strategy", "auto"),
            year_segment=data.get("year_segment", 1),
            continue_on_error=data.get("continue_on_error", False),
            debug=data.get("debug", False),
            trace=data.get("trace", False),
            do_profile=data.get("do_profile", False),
            profile_path=Path(data.get("profile_path", "cpu.profile")),
            index_url=os.environ.get("PDF_TABLE_SCRAPER_INDEX_URL") or data.get("index_url", DEFAULT_INDEX_URL),
            index_page=data.get("index_page", "ryoushoku.html"),
            html_dir=Path(data.get("html_dir", "html")),
            pdf_dir=Path(data.get("pdf_dir", "PDF")),
            http_timeout=data.get("http_timeout", 30.0),
            home_dir=Path.home(),
        )

    def validate(self) -> list[str]:
        """Return list of validation errors, empty if valid."""
        errors = []
        if not 0 <= self.verbose <= 4:
            errors.append(f"Invalid verbose level: {self.verbose}. Must be 0-4")
        if self.min_width < 0 or self.min_height < 0:
            errors.append(
                f"Size thresholds must be non-negative, got width={self.min_width} height={self.min_height}"
            )
        if self.table_strategy not in ("auto", "lines", "text"):
            errors.append(
                f"Invalid table_strategy: {self.table_strategy}. Must be 'auto', 'lines' or 'text'"
            )
        if str(self.csv_dir) in (".", ".."):
            errors.append(f"CSV directory {str(self.csv_dir)!r} not allowed")

        # Table extraction hard requirement
        from .table_extractor import TableExtractor
        if not TableExtractor.is_available():
            errors.append(
                "Table extraction requires PyMuPDF 1.23+. "
                "Run: pip install --upgrade pymupdf"
            )

        return errors
