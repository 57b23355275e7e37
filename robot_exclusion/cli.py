# === FILE: robot_exclusion/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for robot_exclusion.

Commands:
  check     Ask the service whether an agent may fetch one or more URIs
  match     Evaluate paths against a local robots.txt file
  parse     Print the groups of a local robots.txt file as JSON
  config    Show the effective configuration

Global options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only if omitted)
  --log-format FORMAT Logging format string

Other:
  --version, -v       Show the version

Example:
  robot-exclusion check MyBot/1.0 https://example.com/private/page
"""
import json
import sys
from pathlib import Path

import click

from robot_exclusion import __version__
from robot_exclusion.config import load_config
from robot_exclusion.crawler.fetcher import RobotsDownloader
from robot_exclusion.crawler.robots import is_allowed, request_path
from robot_exclusion.engine import RobotExclusionService
from robot_exclusion.logger import init_logging
from robot_exclusion.parser.builder import parse_robots
from robot_exclusion.parser.robots_parser import ParseError
from robot_exclusion.utils import resolve_charset

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


class CharsetParamType(click.ParamType):
    """Converts charset names and aliases (``latin1``, ``csASCII``...) to codec names."""
    name = 'charset'

    def convert(self, value, param, ctx):
        try:
            return resolve_charset(value)
        except LookupError:
            self.fail(f'Unknown charset: {value}', param, ctx)


CHARSET = CharsetParamType()


def _load_robots_file(robots_file: Path, charset: str):
    try:
        with robots_file.open('rb') as stream:
            return parse_robots(stream, charset)
    except (OSError, ParseError) as e:
        print_error(f'Cannot parse {robots_file}: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='robot-exclusion, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """robot-exclusion command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@click.argument('agent')
@click.argument('uris', nargs=-1, required=True)
@click.pass_context
def check(ctx, agent, uris):
    """Fetch robots.txt for each URI and report whether AGENT may crawl it."""
    cfg = ctx.obj['config']
    service = RobotExclusionService(cfg, downloader=cli.downloader_factory(cfg))
    with service:
        for uri in uris:
            verdict = 'allowed' if service.is_allowed(agent, uri) else 'disallowed'
            click.echo(f'{verdict}\t{uri}')


@cli.command('match', context_settings=CONTEXT_SETTINGS)
@click.argument('robots_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('paths', nargs=-1, required=True)
@click.option('--agent', '-a', default=None, help='Crawler agent string (default: config user_agent)')
@click.option('--charset', type=CHARSET, default=None, help='Charset of ROBOTS_FILE (default: config default_charset)')
@click.pass_context
def match(ctx, robots_file, paths, agent, charset):
    """Evaluate PATHS (or full URIs) against a local ROBOTS_FILE."""
    cfg = ctx.obj['config']
    robots = _load_robots_file(robots_file, charset or cfg.default_charset)
    agent = agent or cfg.user_agent
    for path in paths:
        verdict = 'allowed' if is_allowed(robots, agent, request_path(path)) else 'disallowed'
        click.echo(f'{verdict}\t{path}')


@cli.command('parse', context_settings=CONTEXT_SETTINGS)
@click.argument('robots_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--charset', type=CHARSET, default=None, help='Charset of ROBOTS_FILE (default: config default_charset)')
@click.option('--pretty', is_flag=True, help='Indent JSON output by 2 spaces')
@click.pass_context
def parse(ctx, robots_file, charset, pretty):
    """Print the user-agent groups of ROBOTS_FILE as JSON."""
    cfg = ctx.obj['config']
    robots = _load_robots_file(robots_file, charset or cfg.default_charset)
    click.echo(json.dumps(robots.as_dict(), ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


# expose at module level for test monkey-patching
cli.downloader_factory = RobotsDownloader

if __name__ == "__main__":
    cli()
