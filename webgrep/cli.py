#!/usr/bin/env python3
"""
Command-line entry point of WebGrep.

Usage:
  webgrep [OPTION]... PATTERN [URL]...

Searches PATTERN recursively on the Web, starting from the given URLs.
Short options combine, as in grep:

  webgrep -ceht --threads=1000 Nantes https://fr.wikipedia.org/wiki/Nantes

Exit status: 0 if some page matched, 1 if none did, 2 on usage or
configuration errors, 130 when interrupted.
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict

import click
from click.core import ParameterSource

from webgrep import __version__
from webgrep.config import load_config
from webgrep.engine import start_crawl
from webgrep.errors import ConfigurationError
from webgrep.logger import configure as configure_logging

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

OUTPUT_FLAGS = (
    "count",
    "emphasize",
    "no_filename",
    "files_with_matches",
    "only_matching",
    "quiet",
    "initial_tab",
)
CRAWL_OPTIONS = ("offline", "threads", "follow_all", "max_pages", "timeout")


def print_error(message: str, code: int = 2):
    click.secho(message, fg='red', err=True)
    sys.exit(code)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', message='WebGrep, version %(version)s')
@click.option('-c', '--count', is_flag=True,
              help='Print a count of matching html blocks for each found url.')
@click.option('-e', '--emphasize', is_flag=True,
              help='Print the matching expression in colors.')
@click.option('-f', '--no-filename', is_flag=True,
              help='Suppress the prefixing of url on output.')
@click.option('-l', '--files-with-matches', is_flag=True,
              help='Suppress normal output; instead print the url of each page that contains the pattern.')
@click.option('-o', '--only-matching', is_flag=True,
              help='Print only the matched (non-empty) parts of a matching line, each on a separate line.')
@click.option('-q', '--quiet', is_flag=True,
              help='Quiet; do not write anything to standard output.')
@click.option('-t', '--initial-tab', is_flag=True,
              help='Put a tab before the content of each matching line.')
@click.option('-O', '--offline', is_flag=True,
              help='Crawl a synthetic local web. Useful if a firewall blocks your internet access.')
@click.option('--threads', type=click.IntRange(min=1), default=1, show_default=True, metavar='N',
              help='Parallelize the search amongst N workers.')
@click.option('--follow-all', is_flag=True,
              help='Also follow the links of pages that do not match.')
@click.option('--max-pages', type=click.IntRange(min=1), default=None, metavar='N',
              help='Stop discovering new pages after N visited URLs.')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=10.0, show_default=True,
              help='Timeout of one request (seconds).')
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML/JSON file with default settings; command-line options win.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level (logs go to stderr).'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also write logs to this file.'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Format string for log records.'
)
@click.argument('pattern')
@click.argument('urls', nargs=-1)
@click.pass_context
def cli(ctx, pattern, urls, config_path, log_level, log_file, log_format, **options):
    """Search PATTERN recursively on the Web, starting from the given URLs."""
    configure_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )

    # Only values typed on the command line override the config file.
    given = {
        name: value for name, value in options.items()
        if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT
    }
    overrides: Dict[str, Any] = {k: v for k, v in given.items() if k in CRAWL_OPTIONS}
    overrides['pattern'] = pattern
    if urls:
        overrides['seeds'] = list(urls)
    output = {k: v for k, v in given.items() if k in OUTPUT_FLAGS}
    if output:
        overrides['output'] = output

    try:
        config = load_config(config_path, **overrides)
    except ConfigurationError as e:
        print_error(f'Configuration error: {e}')

    try:
        stats = asyncio.run(start_crawl(config))
    except KeyboardInterrupt:
        print_error('Interrupted', code=130)

    ctx.exit(0 if stats.matched else 1)


if __name__ == "__main__":
    cli()
