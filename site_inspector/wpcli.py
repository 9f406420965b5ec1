"""WP-CLI subprocess adapter and the database source built on ``wp db query``."""

import json
import logging
import subprocess
from typing import Any

logger = logging.getLogger(__name__)

NULL = "NULL"

_BATCH_ESCAPES = {"t": "\t", "n": "\n", "\\": "\\", "0": "\0"}


class SiteError(Exception):
    """A collaborator could not answer; the running inspection fails."""


class WpCliError(SiteError):
    pass


class DatabaseError(SiteError):
    pass


class WpCli:
    """Runs ``wp`` commands against one WordPress installation."""

    def __init__(self, binary: str = "wp", path: str | None = None,
                 timeout: float | None = 120.0):
        self.binary = binary
        self.path = path
        self.timeout = timeout

    def _command(self, args: tuple[str, ...]) -> list[str]:
        command = [self.binary, *args]
        if self.path:
            command.append(f"--path={self.path}")
        return command

    def _execute(self, args: tuple[str, ...]) -> subprocess.CompletedProcess:
        command = self._command(args)
        logger.debug("Running %s", " ".join(command))
        try:
            return subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise WpCliError(f"WP-CLI binary not found: {self.binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise WpCliError(f"WP-CLI timed out after {self.timeout}s: wp {' '.join(args)}") from exc

    def run(self, *args: str) -> str:
        """Return stdout of ``wp <args>``; a non-zero exit raises WpCliError."""
        proc = self._execute(args)
        if proc.returncode != 0:
            detail = proc.stderr.strip() or f"exit status {proc.returncode}"
            raise WpCliError(f"wp {args[0] if args else ''} failed: {detail}")
        return proc.stdout

    def succeeds(self, *args: str) -> bool:
        """True if ``wp <args>`` exits with status 0 (e.g. ``plugin is-active``)."""
        return self._execute(args).returncode == 0

    def json(self, *args: str) -> Any:
        output = self.run(*args, "--format=json")
        try:
            return json.loads(output) if output.strip() else None
        except ValueError as exc:
            raise WpCliError(f"wp {args[0]} returned invalid JSON") from exc

    def eval_php(self, code: str) -> str:
        return self.run("eval", code)

    def option(self, name: str, default: Any = None) -> Any:
        """Read an option as JSON; a missing option gives ``default``."""
        proc = self._execute(("option", "get", name, "--format=json"))
        if proc.returncode != 0:
            return default
        try:
            return json.loads(proc.stdout)
        except ValueError:
            return default


def _unescape(field: str) -> str | None:
    if field == NULL:
        return None
    if "\\" not in field:
        return field
    out = []
    chars = iter(field)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            out.append(_BATCH_ESCAPES.get(nxt, nxt))
        else:
            out.append(ch)
    return "".join(out)


def parse_batch_output(output: str) -> list[dict[str, str | None]]:
    """Parse MySQL client batch output: a header line, then tab-separated rows."""
    lines = output.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if not lines or lines[0] == "":
        return []
    header = lines[0].split("\t")
    records = []
    for line in lines[1:]:
        fields = [_unescape(f) for f in line.split("\t")]
        records.append(dict(zip(header, fields)))
    return records


class Database:
    """Query execution through ``wp db query``; returns records with named fields."""

    def __init__(self, wp: WpCli):
        self.wp = wp
        self._prefix = None

    @property
    def prefix(self) -> str:
        if self._prefix is None:
            self._prefix = self.wp.run("db", "prefix").strip()
        return self._prefix

    def table(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def query(self, sql: str) -> list[dict[str, str | None]]:
        try:
            output = self.wp.run("db", "query", sql)
        except WpCliError as exc:
            raise DatabaseError(f"Database query failed: {exc}") from exc
        return parse_batch_output(output)

    def scalar(self, sql: str) -> str | None:
        records = self.query(sql)
        if not records:
            return None
        return next(iter(records[0].values()), None)
