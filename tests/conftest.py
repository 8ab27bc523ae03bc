# File: tests/conftest.py
from __future__ import annotations

import asyncio
import io
import re
from collections import Counter
from typing import Dict, Iterable, Optional, Sequence, Tuple

import pytest

from webgrep.config import CrawlConfig, OutputOptions
from webgrep.crawler.models import PageResult
from webgrep.errors import FetchError
from webgrep.logger import configure
from webgrep.output import OutputSink


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


class FakeFetcher:
    """
    In-memory web: ``pages`` maps a URL to ``(matches, links)``.

    Unknown URLs and URLs in ``failing`` raise FetchError. Every call is counted,
    and the highest number of simultaneous fetches is recorded.
    """

    def __init__(
        self,
        pages: Dict[str, Tuple[Sequence[str], Sequence[str]]],
        *,
        failing: Iterable[str] = (),
        delay: float = 0.0,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.pages = pages
        self.failing = set(failing)
        self.delay = delay
        self.delays = delays or {}
        self.calls: Counter[str] = Counter()
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> PageResult:
        self.calls[url] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, self.delay))
            if url in self.failing or url not in self.pages:
                raise FetchError(url, "unreachable")
            matches, links = self.pages[url]
            return PageResult(url=url, matches=tuple(matches), links=tuple(links))
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def _reset_logging():
    """The CLI points the project logger at CliRunner streams; restore it after each test."""
    yield
    configure()


@pytest.fixture()
def make_config():
    """Factory for CrawlConfig with test-friendly defaults."""

    def _make(**kwargs) -> CrawlConfig:
        kwargs.setdefault("pattern", "x")
        return CrawlConfig(**kwargs)

    return _make


@pytest.fixture()
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def sink(stream) -> OutputSink:
    """Plain sink (url header + matching lines) writing into an in-memory stream."""
    return OutputSink(OutputOptions(), re.compile("x", re.DOTALL), stream=stream)
