"""Time-window log scanner — bracketed timestamps, trailing duration, multi-file."""

import glob
import logging
import os
import re
from datetime import datetime, timedelta
from typing import Generator, Iterable

from site_inspector.result import Data, Empty, Failure, Outcome, TabularResult

logger = logging.getLogger(__name__)

TIMESTAMP_PATTERN = re.compile(r"\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]", re.ASCII)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_DAYS = 7

# Larger windows reach outside the datetime range.
MAX_DAYS = 36500

LOG_COLUMNS = ("date", "message")


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each line of a file, or nothing if the file cannot be opened."""
    try:
        f = open(filepath, "r", encoding="utf-8", errors="replace", newline="")
    except OSError as exc:
        logger.debug("Skipping unreadable log file %s: %s", filepath, exc)
        return
    with f:
        yield from f


def parse_timestamp(line: str) -> datetime | None:
    """Return the first bracketed timestamp in the line, or None."""
    match = TIMESTAMP_PATTERN.search(line)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1), TIMESTAMP_FORMAT)
    except ValueError:
        return None


def scan_files(paths: Iterable[str], days: int = DEFAULT_DAYS,
               now: datetime | None = None) -> TabularResult:
    """Collect {date, message} rows newer than ``now - days`` across files.

    Rows keep the order of ``paths`` and, within a file, line order.
    Nothing is resorted by timestamp.
    """
    if now is None:
        now = datetime.now()
    cutoff = now - timedelta(days=days)

    rows = []
    for path in paths:
        for line in read_lines(path):
            timestamp = parse_timestamp(line)
            if timestamp is None or timestamp < cutoff:
                continue
            rows.append({
                "date": timestamp.strftime(TIMESTAMP_FORMAT),
                "message": line.strip(),
            })
    return TabularResult(columns=LOG_COLUMNS, rows=tuple(rows))


def scan_directory(log_dir: str, pattern: str, days: int = DEFAULT_DAYS,
                   now: datetime | None = None,
                   empty_message: str = "No log entries found.") -> Outcome:
    """Scan the files in ``log_dir`` matching a glob ``pattern``.

    A missing directory is a Failure; a directory without matching files,
    or without recent entries, is Empty.
    """
    if not os.path.isdir(log_dir):
        return Failure(f"Log directory not found: {log_dir}")

    paths = sorted(glob.glob(os.path.join(glob.escape(log_dir), pattern)))
    logger.debug("Scanning %d file(s) in %s", len(paths), log_dir)

    result = scan_files(paths, days=days, now=now)
    if not result.rows:
        return Empty(empty_message)
    return Data(result)
