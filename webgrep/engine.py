# File: webgrep/engine.py
"""webgrep.engine: orchestration layer that wires config, fetcher, frontier, pool and sink."""

from __future__ import annotations

import contextlib
import time
from typing import Any, AsyncContextManager, Optional

from webgrep.config import CrawlConfig
from webgrep.crawler.fetcher import Fetcher, HttpFetcher
from webgrep.crawler.frontier import Frontier
from webgrep.crawler.models import CrawlStats
from webgrep.crawler.offline import OfflineFetcher
from webgrep.crawler.pool import WorkerPool
from webgrep.logger import logger
from webgrep.output import OutputSink

__all__ = ["build_fetcher", "start_crawl"]


def build_fetcher(config: CrawlConfig) -> Any:
    """Return the fetcher selected by the configuration (an async context manager)."""
    if config.offline:
        return OfflineFetcher(config.regex, delay=config.offline_delay)
    return HttpFetcher(config)


async def start_crawl(
    config: CrawlConfig,
    *,
    fetcher: Optional[Fetcher] = None,
    sink: Optional[OutputSink] = None,
    frontier: Optional[Frontier] = None,
) -> CrawlStats:
    """
    Crawl from ``config.seeds`` until no reachable work is left and return the summary.

    Parameters
    ----------
    config : CrawlConfig
        Crawl configuration.
    fetcher
        Page source; by default :func:`build_fetcher` is used and opened for the crawl.
        A caller-supplied fetcher is used as is, its lifecycle stays with the caller.
    sink
        Output sink; by default records go to standard output.
    frontier
        Frontier to seed; mostly useful to inspect the visited set afterwards.
    """
    regex = config.regex
    if sink is None:
        sink = OutputSink(config.output, regex)
    if frontier is None:
        frontier = Frontier(max_urls=config.max_pages)

    source: AsyncContextManager[Any]
    source = build_fetcher(config) if fetcher is None else contextlib.nullcontext(fetcher)

    mode = "offline" if config.offline else "online"
    logger.info("Crawl started (%s): %d seeds, %d workers, pattern %r", mode, len(config.seeds), config.threads, config.pattern)
    start = time.monotonic()

    async with source as active_fetcher:
        await frontier.enqueue(config.seeds)
        pool = WorkerPool(frontier, active_fetcher, sink, config.threads, follow_all=config.follow_all)
        stats = await pool.run()

    stats.elapsed = time.monotonic() - start
    logger.info(
        "Finished: %d pages visited, %d fetched, %d failed, %d matched in %.2f s (%.2f pages/s)",
        stats.visited,
        stats.fetched,
        stats.failed,
        stats.matched,
        stats.elapsed,
        stats.fetched / stats.elapsed if stats.elapsed else 0,
    )
    return stats
