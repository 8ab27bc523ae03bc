"""
Data models for the WebGrep crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class PageResult:
    """Outcome of one fetch: the claimed URL, its matching blocks and its outbound links."""

    url: str
    matches: Tuple[str, ...] = ()
    links: Tuple[str, ...] = ()


@dataclass(slots=True)
class CrawlStats:
    """Summary of a finished crawl."""

    visited: int = 0
    fetched: int = 0
    failed: int = 0
    matched: int = 0
    elapsed: float = 0.0
