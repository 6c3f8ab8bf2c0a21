"""Extract the tables in downloaded PDFs to CSV files."""
from .models import (
    MalformedTableError,
    StringTable,
    DocumentTables,
)
from .text_cleaning import normalize

__all__ = [
    "MalformedTableError",
    "StringTable",
    "DocumentTables",
    "normalize",
]
