"""webgrep.parser: HTML block and link extraction."""

from webgrep.parser.html_parser import BLOCK_TAGS, extract_blocks, extract_links, parse_page

__all__ = ("BLOCK_TAGS", "extract_blocks", "extract_links", "parse_page")
