"""CLI entry point: openqa-serial INPUT."""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .config import Config

EXIT_SOURCE_ERROR = 1
EXIT_USAGE_ERROR = 1
EXIT_PARSE_ERROR = 2

_CONSOLE_FMT = "%(levelname)s %(name)s: %(message)s"

EPILOG = """\
INPUT can be a serial_terminal.txt (or any other) file, an openQA job URL, or
any asset URL of a job. Use - to read from standard input.

\b
Examples:
    openqa-serial serial_terminal.txt
    openqa-serial https://openqa.opensuse.org/tests/123456
    openqa-serial -n https://openqa.opensuse.org/tests/123456/file/serial0.txt
"""


def setup_logging(verbose: bool) -> logging.Logger:
    root = logging.getLogger("openqa_serial")
    root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(_CONSOLE_FMT))
    root.addHandler(console)
    return root


class ReaderCommand(click.Command):
    """Report bad arguments with exit status 1, keeping 2 for parse errors."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = EXIT_USAGE_ERROR
            raise


def _init_config(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    config = Config()
    if config.ensure_env_file():
        click.echo(f"Created {config.env_file}")
    else:
        click.echo(f"Config file already exists: {config.env_file}")
    ctx.exit()


@click.command(cls=ReaderCommand, epilog=EPILOG)
@click.argument("location", metavar="INPUT")
@click.option("-n", "--no-numbers", "--nonumbers", "no_numbers", is_flag=True, help="Don't display command numbers")
@click.option("--color/--no-color", default=None, help="Colorize commands by exit status (default: on)")
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr")
@click.option(
    "--init-config",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_init_config,
    help="Write a commented env file with the display defaults and exit",
)
@click.version_option(__version__, prog_name="openqa-serial")
def main(location: str, no_numbers: bool, color: bool | None, verbose: bool) -> None:
    """openqa-serial terminal reader.

    Small helper to make the serial terminal better readable.
    """
    from .source import SourceError, read_lines
    from .render import format_entries
    from .transcripts import ParseError
    from .transcripts.serial import parse_lines

    setup_logging(verbose)
    Config().load_env_file()  # Seed os.environ before constructing final config
    config = Config()
    if no_numbers:
        config.numbers = False
    if color is not None:
        config.colors = color

    try:
        lines = read_lines(location, config)
    except SourceError as e:
        click.echo(str(e), err=True)
        sys.exit(EXIT_SOURCE_ERROR)

    options = config.render_options()
    try:
        entries = parse_lines(lines)
    except ParseError as e:
        for line in format_entries(e.entries, options):
            click.echo(line, color=config.colors)
        click.echo(f"parse error: {e}", err=True)
        sys.exit(EXIT_PARSE_ERROR)

    for line in format_entries(entries, options):
        click.echo(line, color=config.colors)
