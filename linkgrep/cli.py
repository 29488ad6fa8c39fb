# === FILE: linkgrep/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for linkgrep.

Commands:
  search HAYSTACK TERM   Fetch every URL found in HAYSTACK and report where TERM occurs
  urls HAYSTACK          Only list the URLs that would be fetched
  config                 Show the effective configuration

Global options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Also write logs to this file
  --log-format FORMAT Logging format string

Options of the search command:
  --concurrency INT   Max simultaneous requests
  --timeout SEC       Per-request timeout
  --max-redirects INT Redirects followed per request
  --retry INT         Retries for transient failures
  --encoding NAME     Encoding of HAYSTACK
  --run-timeout SEC   Deadline for the whole run
  --json PATH         Save a JSON report
  --html PATH         Save an HTML report
  --template DIR      Directory with report.html.j2
  --pretty            Indent the JSON report

Additionally:
  --version, -v       Show the linkgrep version

Example:
  linkgrep search bookmarks.md "asyncio" --concurrency 16 --json matches.json
"""
import sys
import asyncio
from pathlib import Path

import click
from pydantic import ValidationError

from linkgrep import __version__
from linkgrep.aggregator import aggregate_results
from linkgrep.config import apply_overrides, load_config
from linkgrep.engine import NoAddressesError, start_search
from linkgrep.extractor import extract_addresses
from linkgrep.logger import init_logging
from linkgrep.report import ReportEmitter
from linkgrep.report.html_report import render_html
from linkgrep.report.json_report import render_json
from linkgrep.utils import read_haystack

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)

def _read_input(path: Path, encoding: str) -> str:
    try:
        return read_haystack(path, encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        print_error(f'Cannot read input file {path}: {e}')

@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='linkgrep, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also write logs to this file'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """linkgrep: search the pages linked from a document for a term."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (ValidationError, ValueError, TypeError, OSError) as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg

@cli.command('search', context_settings=CONTEXT_SETTINGS)
@click.argument('haystack', type=click.Path(dir_okay=False, path_type=Path))
@click.argument('term')
@click.option('--concurrency', type=int, default=None, help='Max simultaneous requests')
@click.option('--timeout', type=float, default=None, help='Per-request timeout (seconds)')
@click.option('--max-redirects', 'max_redirects', type=int, default=None, help='Redirects followed per request')
@click.option('--retry', 'retry_times', type=int, default=None, help='Retries for transient failures')
@click.option('--encoding', default='utf-8', show_default=True, help='Encoding of HAYSTACK')
@click.option('--run-timeout', 'run_timeout', type=float, default=None, help='Deadline for the whole run (seconds)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save a JSON report to this file'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save an HTML report to this file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with report.html.j2 (bundled template by default)'
)
@click.option('--pretty', is_flag=True, help='Indent the JSON report (2 spaces)')
@click.pass_context
def search(ctx, haystack, term, concurrency, timeout, max_redirects, retry_times, encoding,
           run_timeout, json_output, html_output, template_dir, pretty):
    """Fetch every URL found in HAYSTACK and print where TERM occurs."""
    try:
        cfg = apply_overrides(
            ctx.obj['config'],
            concurrency=concurrency,
            timeout=timeout,
            max_redirects=max_redirects,
            retry_times=retry_times,
            run_timeout=run_timeout,
        )
    except (ValidationError, ValueError) as e:
        print_error(f'Invalid configuration: {e}')
    if not term:
        print_error('Search term must not be empty')

    text = _read_input(haystack, encoding)

    try:
        coro = start_search(cfg, text, term, source=str(haystack))
        if cfg.run_timeout:
            run = asyncio.run(asyncio.wait_for(coro, timeout=cfg.run_timeout))
        else:
            run = asyncio.run(coro)
    except asyncio.TimeoutError:
        print_error(f'Search did not finish within {cfg.run_timeout} seconds')
    except NoAddressesError:
        print_error(f'No URLs found in {haystack}')

    ReportEmitter(click.echo).emit(run.documents, term)

    if not json_output and not html_output:
        return

    report = aggregate_results(run)

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}', err=True)
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}', err=True)
        except OSError as e:
            print_error(f'Failed to save HTML report: {e}')

@cli.command('urls', context_settings=CONTEXT_SETTINGS)
@click.argument('haystack', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--encoding', default='utf-8', show_default=True, help='Encoding of HAYSTACK')
@click.pass_context
def urls(ctx, haystack, encoding):
    """List the URLs found in HAYSTACK without fetching them."""
    cfg = ctx.obj['config']
    text = _read_input(haystack, encoding)
    addresses = extract_addresses(text, cfg.trim_chars)
    if not addresses:
        print_error(f'No URLs found in {haystack}')
    for address in addresses:
        click.echo(str(address))

@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))

if __name__ == "__main__":
    cli()
