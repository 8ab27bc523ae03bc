"""
Worker: one slot of the crawl pool.

Loop: take a URL from the frontier, fetch it, hand matching pages to the output sink,
queue the discovered links, then complete the URL. Links are always queued before the
URL is completed so the frontier never sees a moment where work looks finished while
new URLs are still on their way.
"""
from __future__ import annotations

from typing import Tuple

from webgrep.crawler.fetcher import Fetcher
from webgrep.crawler.frontier import Frontier
from webgrep.errors import FetchError
from webgrep.logger import logger
from webgrep.output import OutputSink

__all__ = ("Worker",)


class Worker:
    """Claims, fetches and expands URLs until the frontier reports the crawl is over."""

    def __init__(
        self,
        name: str,
        frontier: Frontier,
        fetcher: Fetcher,
        sink: OutputSink,
        *,
        follow_all: bool = False,
    ) -> None:
        self.name = name
        self.frontier = frontier
        self.fetcher = fetcher
        self.sink = sink
        self.follow_all = follow_all
        # Private counters, summed by the pool once the worker has stopped.
        self.fetched = 0
        self.failed = 0
        self.matched = 0

    async def run(self) -> None:
        logger.debug("%s started", self.name)
        while True:
            url = await self.frontier.next_url()
            if url is None:
                break
            try:
                await self._process(url)
            finally:
                await self.frontier.complete(url)
        logger.debug("%s stopped (fetched=%d failed=%d)", self.name, self.fetched, self.failed)

    async def _process(self, url: str) -> None:
        try:
            page = await self.fetcher.fetch(url)
        except FetchError as exc:
            self.failed += 1
            logger.debug("%s dropped %s", self.name, exc)
            return

        self.fetched += 1
        if page.matches:
            self.matched += 1
            self.sink.emit(page)

        # Non-matching pages are dead ends unless follow_all is set.
        links: Tuple[str, ...] = page.links if page.matches or self.follow_all else ()
        added = await self.frontier.enqueue(links)
        if added:
            logger.debug("%s queued %d new links from %s", self.name, added, url)
