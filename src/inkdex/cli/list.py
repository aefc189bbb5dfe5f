"""ink list command - list notes straight from the collection."""

import click

from inkdex.cli.utils import load_cli_config
from inkdex.notes.corpus import iter_notes


def _split_tags(value: str | None) -> list[str]:
    if not value:
        return []
    return [t for t in (part.strip() for part in value.split(",")) if t]


@click.command()
@click.option(
    "--recurse/--no-recurse",
    default=None,
    help="Descend into sub-directories (default: notes.recurse from config)",
)
@click.option("-t", "--tags", help="Comma-separated tags; notes with any of them are listed")
@click.option("--include-hidden", is_flag=True, help="Include hidden and ignored notes")
@click.pass_context
def list_command(
    ctx: click.Context,
    recurse: bool | None,
    tags: str | None,
    include_hidden: bool,
) -> None:
    """List notes as ``title<TAB>path`` lines. The index is not consulted."""
    config = load_cli_config(ctx)
    notes = iter_notes(
        config.notes.notes_path,
        recurse=config.notes.recurse if recurse is None else recurse,
        max_depth=config.notes.max_depth,
        tags=_split_tags(tags),
        ignore_patterns=config.notes.ignore,
        include_hidden=include_hidden,
    )
    for note in notes:
        click.echo(f"{note.title}\t{note.path}")
