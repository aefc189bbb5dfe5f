"""Inkdex CLI - ink command."""

from pathlib import Path

import click

from inkdex import __version__
from inkdex.cli.index import index_command
from inkdex.cli.list import list_command
from inkdex.cli.mark import mark_group
from inkdex.cli.search import search_command
from inkdex.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="ink")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: $XDG_CONFIG_HOME/inkdex/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Inkdex - index and search a directory of markdown notes."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(index_command, name="index")
cli.add_command(search_command, name="search")
cli.add_command(list_command, name="list")
cli.add_command(mark_group, name="mark")


if __name__ == "__main__":
    cli()
