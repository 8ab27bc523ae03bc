"""
Offline fetcher: a synthetic, deterministic web for running WebGrep without network access.

Every page is generated from a :class:`random.Random` seeded with its URL, so the
same URL always yields the same text and the same links, whatever the crawl order
or the number of workers.
"""
from __future__ import annotations

import asyncio
import random
import re
from typing import List

from webgrep.crawler.models import PageResult

__all__ = ("OfflineFetcher", "WORDS")

WORDS = (
    "Nantes",
    "Loire",
    "Atlantique",
    "Bretagne",
    "Océan",
    "Université",
    "Machine",
    "Elephant",
    "Château",
)


class OfflineFetcher:
    """Generates fake pages instead of downloading them.

    Usage:
        async with OfflineFetcher(regex, delay=0.05) as fetcher:
            page = await fetcher.fetch("fake://42")
    """

    def __init__(self, regex: re.Pattern[str], *, delay: float = 0.0) -> None:
        self.regex = regex
        self.delay = delay

    async def __aenter__(self) -> OfflineFetcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    async def fetch(self, url: str) -> PageResult:
        # Always yield to the loop so offline crawls interleave like real ones.
        await asyncio.sleep(self.delay)
        return self.generate(url)

    def generate(self, url: str) -> PageResult:
        rng = random.Random(url)

        blocks: List[str] = [" ".join(rng.choice(WORDS) for _ in range(20))]
        if rng.random() < 0.6:
            blocks.append(f"Paragraph with {self.regex.pattern} and some words.")

        links = tuple(f"fake://{rng.randrange(10000)}" for _ in range(2 + rng.randrange(3)))
        matches = tuple(b for b in blocks if self.regex.search(b))
        return PageResult(url=url, matches=matches, links=links)
