"""ink index command - rebuild the note index."""

from pathlib import Path

import click

from inkdex.cli.utils import build_engine, cli_errors
from inkdex.core.progress import pluralize, spinner, status


@click.command()
@click.option(
    "--notes-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Note collection to index (default: notes.notes_dir from config)",
)
@click.option(
    "--index-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Index location (default: $XDG_CACHE_HOME/inkdex)",
)
@click.option(
    "--recurse/--no-recurse",
    default=None,
    help="Descend into sub-directories (default: notes.recurse from config)",
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    help="Deepest directory level searched (default: notes.max_depth from config)",
)
@click.option(
    "--ignore",
    "ignore",
    multiple=True,
    metavar="PATTERN",
    help="Glob of notes to hide, relative to the notes dir; replaces notes.ignore",
)
@click.option("--no-ignore", is_flag=True, help="Hide no notes by path, whatever the config says")
@click.option("-q", "--quiet", is_flag=True, help="Print nothing on success")
@click.pass_context
def index_command(
    ctx: click.Context,
    notes_dir: Path | None,
    index_dir: Path | None,
    recurse: bool | None,
    max_depth: int | None,
    ignore: tuple[str, ...],
    no_ignore: bool,
    quiet: bool,
) -> None:
    """Rebuild the index from the note collection."""
    if ignore and no_ignore:
        raise click.UsageError("--ignore and --no-ignore are mutually exclusive")
    patterns: list[str] | None = None
    if no_ignore:
        patterns = []
    elif ignore:
        patterns = list(ignore)

    engine = build_engine(
        ctx,
        notes_dir=notes_dir,
        index_dir=index_dir,
        ignore=patterns,
        recurse=recurse,
        max_depth=max_depth,
    )

    with cli_errors():
        if quiet:
            stats = engine.rebuild()
        else:
            with spinner(f"Indexing {engine.notes_root}"):
                stats = engine.rebuild()

    if quiet:
        return
    for error in stats.errors:
        status(error, style="warning", indent=2)
    summary = f"Indexed {pluralize(stats.document_count, 'note')}"
    if stats.skipped:
        summary += f" ({stats.skipped} skipped)"
    status(f"{summary} in {stats.duration:.2f}s", style="success")
