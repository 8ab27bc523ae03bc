"""HTML parsing utilities for WebGrep.

A fetched page is reduced to two things:

* blocks — the text of headings, paragraphs and definition-list entries
  (``h1``–``h5``, ``p``, ``dt``, ``dd``) whose text contains a match of the
  search pattern;
* links — absolute http(s) URLs of ``<a href="…">`` tags, without fragments.

Block text is whitespace-normalized, so a paragraph spanning several source
lines is searched and printed as one line.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import List, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from webgrep.crawler.models import PageResult
from webgrep.utils import is_http_url, normalize_url

__all__: Sequence[str] = ("BLOCK_TAGS", "extract_blocks", "extract_links", "parse_page")

BLOCK_TAGS: tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "p", "dt", "dd")


def _block_text(tag: Tag) -> str:
    return " ".join(tag.get_text(" ").split())


def extract_blocks(soup: BeautifulSoup, regex: re.Pattern[str]) -> List[str]:
    """Return the text of every block element that contains a match, in document order."""
    blocks: List[str] = []
    for tag in soup.find_all(list(BLOCK_TAGS)):
        if not isinstance(tag, Tag):
            continue
        text = _block_text(tag)
        if regex.search(text):
            blocks.append(text)
    return blocks


def extract_links(soup: BeautifulSoup, base_url: str) -> List[str]:
    """
    Return absolute http(s) links of the page, fragments stripped.

    Ignores mailto:, javascript:, other non-web schemes and hrefs that do not
    parse as URLs.
    """
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.startswith(("mailto:", "javascript:", "#")):
            continue
        try:
            absolute = normalize_url(urljoin(base_url, raw))
            if not is_http_url(absolute):
                continue
        except ValueError:
            # e.g. an unbalanced "[" in the host part
            continue
        links.append(absolute)
    return links


def parse_page(
    url: str,
    html: Union[str, bytes],
    regex: re.Pattern[str],
    base_url: Optional[str] = None,
    encoding: Optional[str] = None,
) -> PageResult:
    """Parse *html* fetched from *url* into a :class:`PageResult`.

    Parameters
    ----------
    url
        The claimed URL; becomes ``PageResult.url``.
    html
        Markup of the page. Raw bytes are decoded by BeautifulSoup, trying
        *encoding* first, then the document's own ``<meta charset>``.
    regex
        Compiled search pattern.
    base_url
        URL relative links are resolved against, normally the final URL after
        redirects. Defaults to *url*.
    encoding
        Charset announced by the server, if any. Ignored for ``str`` markup.
    """
    if isinstance(html, bytes):
        soup = BeautifulSoup(html, "html.parser", from_encoding=encoding)
    else:
        soup = BeautifulSoup(html, "html.parser")
    return PageResult(
        url=url,
        matches=tuple(extract_blocks(soup, regex)),
        links=tuple(extract_links(soup, base_url or url)),
    )
