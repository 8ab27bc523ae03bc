"""Exception hierarchy for WebGrep."""
from __future__ import annotations

__all__ = ["WebGrepError", "FetchError", "ConfigurationError", "CoordinationError"]


class WebGrepError(Exception):
    """Base class for every error raised by WebGrep."""


class FetchError(WebGrepError):
    """A page could not be fetched or parsed. The URL is abandoned, never retried."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ConfigurationError(WebGrepError):
    """Invalid options or configuration file; raised before any worker starts."""


class CoordinationError(WebGrepError, RuntimeError):
    """Frontier bookkeeping went out of balance (e.g. a URL completed twice)."""
