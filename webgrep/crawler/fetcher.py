"""
Fetcher module: turns a URL into a PageResult over HTTP, with timeout and retry/backoff.

Any transport, HTTP-status, content-type or parsing problem is reported as
:class:`~webgrep.errors.FetchError`; the worker drops the URL and carries on.
"""
from __future__ import annotations

import asyncio
import re
from typing import Optional, Protocol, Sequence

from aiohttp import ClientConnectionError, ClientError, ClientSession, ClientTimeout, TCPConnector
from bs4.builder import ParserRejectedMarkup

from webgrep.config import CrawlConfig
from webgrep.crawler.models import PageResult
from webgrep.errors import FetchError
from webgrep.logger import logger
from webgrep.parser.html_parser import parse_page

__all__ = ("Fetcher", "HttpFetcher", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class Fetcher(Protocol):
    """What a worker needs from a page source."""

    async def fetch(self, url: str) -> PageResult:
        ...


class HttpFetcher:
    """Fetches pages with one shared aiohttp session.

    Usage:
        async with HttpFetcher(config) as fetcher:
            page = await fetcher.fetch(url)
    """

    def __init__(self, config: CrawlConfig, regex: Optional[re.Pattern[str]] = None) -> None:
        self.config = config
        self.regex = regex if regex is not None else config.regex
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> HttpFetcher:
        self.session = ClientSession(
            connector=TCPConnector(limit=self.config.threads),
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent, "Referer": self.config.referrer},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def fetch(self, url: str) -> PageResult:
        """
        Download *url* and extract its matching blocks and links.

        Connection errors and 429/5xx answers are retried ``retry_times`` times with
        exponential backoff. Timeouts and malformed URLs fail at once.
        """
        if not self.session:
            raise RuntimeError("HttpFetcher must be used as async context manager")

        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    if resp.status in RETRY_STATUS and attempts < self.config.retry_times:
                        reason = f"HTTP {resp.status}"
                    else:
                        if resp.status >= 400:
                            raise FetchError(url, f"HTTP {resp.status}")
                        ctype = resp.headers.get("Content-Type", "").lower()
                        if "html" not in ctype:
                            raise FetchError(url, f"unsupported content type {ctype or 'unknown'!r}")
                        # bytes, so the parser can fall back on <meta charset> when the header has none
                        body = await resp.read()
                        charset = resp.charset
                        final_url = str(resp.url)
                        break
            except asyncio.TimeoutError as exc:
                raise FetchError(url, f"timed out after {self.config.timeout}s") from exc
            except ClientConnectionError as exc:
                if attempts >= self.config.retry_times:
                    raise FetchError(url, str(exc) or type(exc).__name__) from exc
                reason = str(exc) or type(exc).__name__
            except (ClientError, ValueError) as exc:
                # InvalidURL and friends: retrying cannot help
                raise FetchError(url, str(exc) or type(exc).__name__) from exc

            attempts += 1
            backoff = min(60.0, self.config.retry_backoff * 2 ** (attempts - 1))
            logger.debug(
                "Retry %d/%d for %s after %.2f s (%s)", attempts, self.config.retry_times, url, backoff, reason
            )
            await asyncio.sleep(backoff)

        try:
            return parse_page(url, body, self.regex, base_url=final_url, encoding=charset)
        except (ValueError, ParserRejectedMarkup) as exc:
            raise FetchError(url, f"cannot parse page: {exc}") from exc
