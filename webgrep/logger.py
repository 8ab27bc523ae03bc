"""Logging for WebGrep.

Grep records own *stdout*, so diagnostics always go to *stderr*, and optionally
to a rotating log file as well. Modules log through the shared :data:`logger`::

    from webgrep.logger import logger
    logger.info("Crawl started")

The CLI calls :func:`configure` once it knows ``--log-level`` and friends.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOGGER_NAME: Final[str] = "WebGrep"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Rotation of --log-file: 5 MiB per file, three old files kept.
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3


def configure(
    level: Union[int, str] = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Point the WebGrep logger at stderr (and *log_file*, if given) at *level*.

    Handlers from a previous call are closed and replaced, so calling it again
    never duplicates output.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)

    # records must not reach a root logger an embedding application configured for stdout
    lg.propagate = False
    return lg


logger: logging.Logger = configure()

__all__ = ["DEFAULT_FORMAT", "LOGGER_NAME", "configure", "logger"]
