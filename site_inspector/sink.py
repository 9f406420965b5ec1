"""Output sinks — aligned text table, CSV export, and operator announcements."""

import csv
import os
import sys
from typing import Any, TextIO

from site_inspector.result import TabularResult

GUTTER = "  "

# ANSI color codes
COLORS = {
    "SUCCESS": "\033[32m",  # green
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",    # red
}
RESET = "\033[0m"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    # Keep one output line per row.
    return " ".join(str(value).splitlines())


def column_widths(result: TabularResult) -> list[int]:
    """Width of each column: the longest of its header and its cells."""
    widths = [len(c) for c in result.columns]
    for row in result.rows:
        for i, column in enumerate(result.columns):
            widths[i] = max(widths[i], len(_cell(row.get(column))))
    return widths


def render_table(result: TabularResult) -> str:
    """Render the result as a header line plus one aligned line per row."""
    widths = column_widths(result)

    def _line(cells: list[str]) -> str:
        return GUTTER.join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

    lines = [_line(list(result.columns))]
    for row in result.rows:
        lines.append(_line([_cell(row.get(c)) for c in result.columns]))
    return "\n".join(lines)


def export_csv(result: TabularResult, path: str) -> str:
    """Write the result to ``path``, replacing any existing content.

    Returns the absolute path written. OSError propagates; a partially
    written file is left where it is.
    """
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(result.columns)
        for row in result.rows:
            writer.writerow([row.get(c) for c in result.columns])
    return os.path.abspath(path)


class Console:
    """Operator-facing output: tables and Success/Warning/Error lines."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None,
                 color: bool | None = None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        if color is None:
            color = hasattr(self.out, "isatty") and self.out.isatty()
        self.color = color

    def _label(self, kind: str, label: str) -> str:
        if not self.color:
            return label
        return f"{COLORS[kind]}{label}{RESET}"

    def log(self, text: str) -> None:
        print(text, file=self.out)

    def announce_empty(self, message: str) -> None:
        print(f"{self._label('SUCCESS', 'Success:')} {message}", file=self.out)

    def announce_warning(self, message: str) -> None:
        print(f"{self._label('WARNING', 'Warning:')} {message}", file=self.err)

    def announce_error(self, message: str) -> None:
        print(f"{self._label('ERROR', 'Error:')} {message}", file=self.err)

    # Success lines that follow data (totals, saved files) look the same.
    announce_success = announce_empty
