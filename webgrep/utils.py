"""webgrep.utils: URL helpers shared by the fetchers, the config layer and the frontier."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urldefrag, urlparse

from webgrep.logger import logger

__all__: Sequence[str] = ("normalize_url", "is_http_url")


def normalize_url(url: str) -> str:
    """Return the dedup key for *url*: surrounding whitespace and the fragment removed."""
    normalized = urldefrag(url.strip()).url
    if normalized != url:
        logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def is_http_url(url: str) -> bool:
    """True when *url* is an absolute http(s) URL with a host."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
