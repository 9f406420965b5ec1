"""Shared pytest fixtures for the site-inspector test suite."""

from __future__ import annotations

import io
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from site_inspector.config import Config
from site_inspector.registry import load_inspectors
from site_inspector.sink import Console
from site_inspector.site import SiteContext

FIXED_NOW = datetime(2024, 6, 10, 0, 0, 0)


class FakeDatabase:
    """Answers queries from canned records keyed by a SQL fragment."""

    def __init__(self, answers: dict[str, list[dict]] | None = None, prefix: str = "wp_"):
        self.answers = answers or {}
        self.prefix = prefix
        self.queries: list[str] = []

    def table(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def query(self, sql: str) -> list[dict]:
        self.queries.append(sql)
        for fragment, records in self.answers.items():
            if fragment in sql:
                return records
        return []

    def scalar(self, sql: str):
        records = self.query(sql)
        if not records:
            return None
        return next(iter(records[0].values()), None)


@pytest.fixture(autouse=True, scope="session")
def inspectors():
    """Register every inspector once for the session."""
    return load_inspectors()


@pytest.fixture()
def config() -> Config:
    return Config(wpscan_api_token="test-token")


@pytest.fixture()
def site(tmp_path, config) -> SiteContext:
    """A SiteContext rooted at tmp_path with fake collaborators."""
    content = tmp_path / "wp-content"
    content.mkdir()
    cfg = Config(
        wp_path=str(tmp_path),
        content_dir=str(content),
        wpscan_api_token=config.wpscan_api_token,
    )
    return SiteContext(
        config=cfg,
        wp=MagicMock(),
        db=FakeDatabase(),
        http=MagicMock(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture()
def console() -> Console:
    return Console(out=io.StringIO(), err=io.StringIO(), color=False)


@pytest.fixture()
def fake_db():
    """Factory for FakeDatabase instances with canned answers."""
    return FakeDatabase
