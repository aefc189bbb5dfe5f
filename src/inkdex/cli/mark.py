"""ink mark commands - bookmarks (notes with a url)."""

import json

import click

from inkdex.cli.utils import load_cli_config
from inkdex.notes.corpus import iter_bookmarks


@click.group()
def mark_group() -> None:
    """Work with bookmarks."""


@mark_group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def mark_list_command(ctx: click.Context, as_json: bool) -> None:
    """List bookmarks as ``title<TAB>url`` lines."""
    config = load_cli_config(ctx)
    root = config.notes.notes_path
    bookmarks = iter_bookmarks(
        root, recurse=config.notes.recurse, max_depth=config.notes.max_depth
    )

    if as_json:
        click.echo(json.dumps([b.to_dict(config.notes.ignore, root) for b in bookmarks]))
        return
    for bookmark in bookmarks:
        click.echo(f"{bookmark.title}\t{bookmark.url}")
