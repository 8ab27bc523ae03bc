"""
Frontier: the visited set, the pending queue and the active-work counter of a crawl.

All three live behind one :class:`asyncio.Condition`, so claiming a URL, queueing it,
taking it and deciding that the crawl is over are serialized with respect to each
other. ``active`` counts URLs that were queued but not yet completed (pending plus in
flight); the crawl is finished only when nothing is pending and ``active`` is zero.
"""
from __future__ import annotations

import asyncio
from collections import deque
from typing import Deque, FrozenSet, Iterable, Optional, Set

from webgrep.errors import CoordinationError
from webgrep.logger import logger

__all__ = ("Frontier",)


class Frontier:
    """Shared work list of the crawl. Every public operation is safe to call from any worker."""

    def __init__(self, max_urls: Optional[int] = None) -> None:
        self._visited: Set[str] = set()
        self._pending: Deque[str] = deque()
        self._active = 0
        self._stopped = False
        self._max_urls = max_urls
        self._budget_warned = False
        self._cond = asyncio.Condition()

    # ------------------------------------------------------------------ #
    # Read-only views                                                    #
    # ------------------------------------------------------------------ #

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def active(self) -> int:
        return self._active

    @property
    def stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------ #
    # Operations                                                         #
    # ------------------------------------------------------------------ #

    async def try_claim(self, url: str) -> bool:
        """Mark *url* visited. True if this call inserted it, False if it was already known."""
        async with self._cond:
            return self._claim(url)

    async def enqueue(self, urls: Iterable[str]) -> int:
        """Claim each URL and queue the newly claimed ones. Returns how many were queued."""
        async with self._cond:
            added = 0
            for url in urls:
                if self._claim(url):
                    self._active += 1
                    self._pending.append(url)
                    added += 1
            if added:
                self._cond.notify(added)
            return added

    async def dequeue(self) -> Optional[str]:
        """Take the oldest pending URL, or None when the queue is momentarily empty."""
        async with self._cond:
            return self._pending.popleft() if self._pending else None

    async def complete(self, url: str) -> None:
        """Close the bookkeeping of a dequeued URL once its links have been enqueued."""
        async with self._cond:
            if self._active <= 0:
                raise CoordinationError(f"{url} completed with no active work left")
            self._active -= 1
            if self._finished():
                self._cond.notify_all()

    async def is_finished(self) -> bool:
        """True when nothing is pending and no worker still holds a URL."""
        async with self._cond:
            return self._finished()

    async def next_url(self) -> Optional[str]:
        """
        Block until a URL can be taken, then return it.

        Returns None when the crawl is finished or stopped. While the queue is empty but
        other workers still hold URLs, the caller sleeps on the condition; it is woken
        by :meth:`enqueue`, by the last :meth:`complete` and by :meth:`stop`.
        """
        async with self._cond:
            while True:
                if self._stopped:
                    return None
                if self._pending:
                    return self._pending.popleft()
                if self._finished():
                    return None
                await self._cond.wait()

    async def stop(self) -> None:
        """Ask every waiting and future caller of :meth:`next_url` to give up."""
        async with self._cond:
            self._stopped = True
            self._cond.notify_all()

    # ------------------------------------------------------------------ #
    # Internals (caller holds the condition's lock)                      #
    # ------------------------------------------------------------------ #

    def _claim(self, url: str) -> bool:
        if url in self._visited:
            return False
        if self._max_urls is not None and len(self._visited) >= self._max_urls:
            if not self._budget_warned:
                logger.warning("Page limit of %d reached, new URLs are ignored", self._max_urls)
                self._budget_warned = True
            return False
        self._visited.add(url)
        return True

    def _finished(self) -> bool:
        return not self._pending and self._active == 0
