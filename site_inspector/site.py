"""Collaborator handles passed explicitly to every inspector."""

from datetime import datetime
from typing import Callable

import requests

from site_inspector.config import Config
from site_inspector.wpcli import Database, WpCli


class SiteContext:
    """One WordPress installation as seen by the inspectors.

    ``root`` and ``content_dir`` come from config when set, otherwise they
    are asked of WP-CLI the first time they are needed.
    """

    def __init__(self, config: Config, wp: WpCli, db: Database,
                 http: requests.Session, clock: Callable[[], datetime] = datetime.now):
        self.config = config
        self.wp = wp
        self.db = db
        self.http = http
        self.clock = clock
        self._root = config.wp_path
        self._content_dir = config.content_dir

    @classmethod
    def from_config(cls, config: Config) -> "SiteContext":
        wp = WpCli(binary=config.wp_binary, path=config.wp_path, timeout=config.wp_timeout)
        return cls(config=config, wp=wp, db=Database(wp), http=requests.Session())

    @property
    def root(self) -> str:
        if self._root is None:
            self._root = self.wp.eval_php("echo ABSPATH;").strip()
        return self._root

    @property
    def content_dir(self) -> str:
        if self._content_dir is None:
            self._content_dir = self.wp.eval_php("echo WP_CONTENT_DIR;").strip()
        return self._content_dir

    def now(self) -> datetime:
        return self.clock()

    def close(self) -> None:
        self.http.close()
