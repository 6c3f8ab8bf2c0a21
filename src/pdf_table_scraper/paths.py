"""Input path resolution and output path derivation."""
from __future__ import annotations

import glob
import logging
import os
import stat
from pathlib import Path

logger = logging.getLogger(__name__)


def expand_user(pattern: str, home_dir: Path | str) -> str:
    """Return *pattern* with every ``~`` replaced by *home_dir*."""
    return pattern.replace("~", str(home_dir))


def is_regular_file(path: Path | str) -> bool:
    """True if *path* is a regular file. Stat errors propagate."""
    return stat.S_ISREG(os.stat(path).st_mode)


def file_size_mb(path: Path | str) -> float:
    """Size of the file at *path* in megabytes."""
    return os.stat(path).st_size / 1024.0 / 1024.0


def patterns_to_paths(patterns: list[str], home_dir: Path | str) -> list[Path]:
    """Return the regular files matched by the glob patterns in *patterns*.

    Patterns may use ``**`` for recursive matching and ``~`` for the home
    directory. The result is de-duplicated and sorted.

    Raises:
        OSError: if a matched path cannot be stat-ed.
    """
    paths: set[str] = set()
    logger.debug(f"patterns={len(patterns)}")
    for i, pattern in enumerate(patterns):
        pattern = expand_user(pattern, home_dir)
        matches = glob.glob(pattern, recursive=True)
        logger.debug(f"patterns[{i}]={pattern!r} {len(matches)} matches")
        for filename in matches:
            if is_regular_file(filename):
                paths.add(filename)
    return [Path(p) for p in sorted(paths)]


# =============================================================================
# Output paths
# =============================================================================

def make_dir(name: str, out_dir: Path | str) -> None:
    """Create *out_dir* and its parents. *name* is how the caller refers to it.

    Raises:
        ValueError: if *out_dir* is ``.`` or ``..``.
    """
    out_dir = str(out_dir)
    if out_dir in (".", ".."):
        raise ValueError(f"{name}={out_dir!r} not allowed")
    if not out_dir:
        return
    Path(out_dir).absolute().mkdir(mode=0o751, parents=True, exist_ok=True)


def extract_directory(path: Path | str, depth: int) -> str:
    """Return a grouping token from *path*.

    ``depth == -1`` gives the file name up to its first ``.``; any other
    depth gives the ``/``-separated segment at that index, up to its first
    ``.``.

    Raises:
        ValueError: if *path* has no segment at *depth*.
    """
    parts = str(path).split("/")
    if depth == -1:
        return parts[-1].split(".")[0]
    try:
        segment = parts[depth]
    except IndexError:
        raise ValueError(f"cannot get directory: path={str(path)!r} depth={depth}") from None
    return segment.split(".")[0]


def csv_sub_dir(csv_dir: Path | str, pdf_path: Path | str, year_segment: int = 1) -> Path:
    """``<csv_dir>/<year>/<month>`` for *pdf_path*."""
    year = extract_directory(pdf_path, year_segment)
    month = extract_directory(pdf_path, -1)
    return Path(csv_dir) / year / month


def change_dir_ext(
    dir_name: Path | str,
    filename: Path | str,
    qualifier: str = "",
    ext_name: str = "",
) -> Path | None:
    """Move *filename* into *dir_name*, inserting ``.qualifier`` before the
    extension and replacing the extension with *ext_name*.

    Returns None when *dir_name* is empty.
    """
    if not str(dir_name):
        return None
    base = Path(filename).name
    stem, ext = os.path.splitext(base)
    if qualifier:
        stem = f"{stem}.{qualifier}"
    path = Path(dir_name) / f"{stem}{ext_name}"
    logger.debug(f"change_dir_ext({str(dir_name)!r},{stem!r},{ext_name!r})->{str(path)!r}")
    return path


def csv_path(csv_root: Path | str, page_num: int, table_index: int) -> Path:
    """Path of the CSV file for table *table_index* (0-based) on *page_num*."""
    return Path(f"{csv_root}.page{page_num}.table{table_index + 1}.csv")
