"""Run one inspector and route its outcome to the console or a CSV file."""

import logging
import os
from typing import Sequence

from site_inspector.registry import lookup
from site_inspector.result import Advisory, Data, Empty, Failure, Outcome, Report
from site_inspector.sink import Console, export_csv, render_table
from site_inspector.site import SiteContext
from site_inspector.wpcli import SiteError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class Runner:
    def __init__(self, site: SiteContext, console: Console):
        self.site = site
        self.console = console

    def run(self, name: str, args: Sequence[str] = (), csv: str | None = None) -> int:
        """Invoke the named inspector; return the command's exit status."""
        spec = lookup(name)
        if spec is None:
            self.console.announce_error(
                f"'{name}' is not a registered command. See 'site-inspector commands'."
            )
            return EXIT_FAILURE

        kwargs = spec.bind(args)
        logger.debug("Running %s with %s", name, kwargs)
        try:
            outcome = spec.func(self.site, **kwargs)
        except SiteError as exc:
            logger.debug("%s failed", name, exc_info=True)
            outcome = Failure(str(exc))

        return self.route(outcome, csv)

    def route(self, outcome: Outcome, csv: str | None = None) -> int:
        if isinstance(outcome, Failure):
            self.console.announce_error(outcome.reason)
            return EXIT_FAILURE

        if isinstance(outcome, Empty):
            self.console.announce_empty(outcome.message)
            return EXIT_OK

        if isinstance(outcome, Advisory):
            self.console.announce_warning(outcome.message)
            return EXIT_OK

        if isinstance(outcome, Report):
            if csv:
                return self.route(Failure("CSV export is not available for multi-table reports."))
            if outcome.preamble:
                self.console.log(outcome.preamble)
            for part in outcome.parts:
                self._show(part)
            return EXIT_OK

        if isinstance(outcome, Data):
            if csv:
                return self._export(outcome, csv)
            self._show(outcome)
            return EXIT_OK

        raise TypeError(f"Unknown outcome: {outcome!r}")

    def _show(self, data: Data) -> None:
        if data.warning:
            self.console.announce_warning(data.warning)
        if data.title:
            self.console.log(data.title)
        self.console.log(render_table(data.result))
        if data.summary:
            self.console.announce_success(data.summary)

    def _export(self, data: Data, csv: str) -> int:
        try:
            path = os.path.join(self.site.content_dir, csv)
        except SiteError as exc:
            return self.route(Failure(str(exc)))
        try:
            written = export_csv(data.result, path)
        except OSError as exc:
            return self.route(Failure(f"Could not write CSV file {path}: {exc}"))
        self.console.announce_success(f"CSV file saved: {written}")
        return EXIT_OK
