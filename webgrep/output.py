"""webgrep.output: grep-like rendering of matching pages.

One :class:`~webgrep.crawler.models.PageResult` becomes one record::

    https://example.org/page: 2        <- header (url and/or count)
    first matching block               <- one line per block, unless -l
    second matching block

The whole record is rendered first and written with a single call under a lock,
so records emitted concurrently never interleave. Order between records is the
crawl order and is not stable.
"""

from __future__ import annotations

import re
import threading
from typing import IO, List, Optional

import click

from webgrep.config import OutputOptions
from webgrep.crawler.models import PageResult

__all__ = ["OutputSink"]


class OutputSink:
    """Serializes records of concurrent workers onto one text stream."""

    def __init__(
        self,
        options: OutputOptions,
        regex: re.Pattern[str],
        stream: Optional[IO[str]] = None,
    ) -> None:
        self.options = options
        self.regex = regex
        self.stream = stream
        self.records = 0
        self._lock = threading.Lock()

    def emit(self, page: PageResult) -> None:
        """Write the record of *page* as one uninterrupted unit."""
        record = self.render(page)
        if not record:
            return
        with self._lock:
            # None lets click strip ANSI codes when the stream is not a terminal.
            click.echo(record, file=self.stream, nl=False, color=True if self.options.emphasize else None)
            self.records += 1

    def render(self, page: PageResult) -> str:
        """Return the full text of the record for *page*, or ``""`` when nothing is printed."""
        opts = self.options
        if opts.quiet or not page.matches:
            return ""

        lines: List[str] = []
        if not opts.no_filename and opts.count:
            lines.append(f"{page.url}: {len(page.matches)}")
        elif not opts.no_filename:
            lines.append(page.url)
        elif opts.count:
            lines.append(str(len(page.matches)))

        if not opts.files_with_matches:
            for block in page.matches:
                lines.extend(self._render_block(block))
        return "".join(f"{line}\n" for line in lines)

    def _render_block(self, block: str) -> List[str]:
        prefix = "\t" if self.options.initial_tab else ""
        spans = [m for m in self.regex.finditer(block) if m.end() > m.start()]

        if self.options.only_matching:
            return [prefix + self._highlight(m.group(0)) for m in spans]

        parts: List[str] = []
        pos = 0
        for m in spans:
            parts.append(block[pos:m.start()])
            parts.append(self._highlight(m.group(0)))
            pos = m.end()
        parts.append(block[pos:])
        return [prefix + "".join(parts)]

    def _highlight(self, text: str) -> str:
        return click.style(text, fg="red") if self.options.emphasize else text
