"""ink search command - query the note index."""

import json

import click

from inkdex.cli.utils import cli_errors, load_cli_config
from inkdex.index.engine import NoteEngine
from inkdex.index.query import SortOrder


@click.command()
@click.argument("query", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "-s",
    "--sort",
    type=click.Choice([s.value for s in SortOrder]),
    default=SortOrder.RELEVANCE.value,
    show_default=True,
    help="Result order",
)
@click.option("-l", "--limit", type=int, default=None, help="Maximum results")
@click.option("--include-hidden", is_flag=True, help="Include hidden and ignored notes")
@click.pass_context
def search_command(
    ctx: click.Context,
    query: tuple[str, ...],
    as_json: bool,
    sort: str,
    limit: int | None,
    include_hidden: bool,
) -> None:
    """Search notes.

    QUERY is free text plus optional #tags, e.g. ``ink search trip #travel``.
    """
    config = load_cli_config(ctx)
    engine = NoteEngine.from_config(config)

    with cli_errors():
        notes = engine.search(
            " ".join(query),
            include_hidden=include_hidden,
            sort=sort,
            limit=limit if limit is not None else config.limits.search_default,
        )

    if as_json:
        click.echo(
            json.dumps(
                [n.to_dict(engine.ignore_patterns, engine.notes_root) for n in notes]
            )
        )
        return
    for note in notes:
        click.echo(f"{note.title}\t{note.path}")
