"""
WorkerPool: runs a fixed number of workers over one frontier and joins them.
"""
from __future__ import annotations

import asyncio
from typing import List

from webgrep.crawler.fetcher import Fetcher
from webgrep.crawler.frontier import Frontier
from webgrep.crawler.models import CrawlStats
from webgrep.crawler.worker import Worker
from webgrep.logger import logger
from webgrep.output import OutputSink

__all__ = ("WorkerPool",)


class WorkerPool:
    """Starts ``size`` workers as asyncio tasks and supervises their shutdown."""

    def __init__(
        self,
        frontier: Frontier,
        fetcher: Fetcher,
        sink: OutputSink,
        size: int,
        *,
        follow_all: bool = False,
    ) -> None:
        if size < 1:
            raise ValueError("pool size must be >= 1")
        self.frontier = frontier
        self.workers: List[Worker] = [
            Worker(f"worker-{i}", frontier, fetcher, sink, follow_all=follow_all)
            for i in range(size)
        ]
        self._tasks: List[asyncio.Task[None]] = []

    async def run(self) -> CrawlStats:
        """Run every worker to completion and return the summed counters."""
        self._tasks = [
            asyncio.create_task(w.run(), name=f"webgrep-{w.name}") for w in self.workers
        ]
        logger.debug("Started %d workers", len(self._tasks))
        try:
            await asyncio.gather(*self._tasks)
        except asyncio.CancelledError:
            # Workers cancelled by stop() end the run normally; our own cancellation does not.
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info("Crawl stopped before completion")
        finally:
            # Reached early on cancellation or when a worker hit a bug.
            for task in self._tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*self._tasks, return_exceptions=True)
        return self.stats()

    async def stop(self) -> None:
        """Abandon in-flight fetches and let every worker leave its loop."""
        await self.frontier.stop()
        for task in self._tasks:
            if not task.done():
                task.cancel()

    def stats(self) -> CrawlStats:
        return CrawlStats(
            visited=len(self.frontier.visited),
            fetched=sum(w.fetched for w in self.workers),
            failed=sum(w.failed for w in self.workers),
            matched=sum(w.matched for w in self.workers),
        )
