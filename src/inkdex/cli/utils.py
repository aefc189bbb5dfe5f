"""CLI utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from inkdex.config.loader import load_config
from inkdex.config.models import InkdexConfig
from inkdex.core.errors import InkdexError, QueryError
from inkdex.core.logging import configure_logging
from inkdex.index.engine import NoteEngine


def load_cli_config(
    ctx: click.Context,
    *,
    notes_dir: Path | None = None,
    index_dir: Path | None = None,
    ignore: list[str] | None = None,
    recurse: bool | None = None,
    max_depth: int | None = None,
) -> InkdexConfig:
    """Load configuration for a command, applying command-line overrides.

    ``None`` leaves the configured value alone; ``ignore=[]`` clears the
    configured ignore patterns.

    Logging is reconfigured from the loaded config unless ``-v`` was given.

    Raises:
        click.ClickException: The config file or an override is invalid.
    """
    obj = ctx.find_root().obj or {}
    overrides: dict[str, Any] = {}
    notes: dict[str, Any] = {}
    if notes_dir is not None:
        notes["notes_dir"] = str(notes_dir)
    if ignore is not None:
        notes["ignore"] = list(ignore)
    if recurse is not None:
        notes["recurse"] = recurse
    if max_depth is not None:
        notes["max_depth"] = max_depth
    if notes:
        overrides["notes"] = notes
    if index_dir is not None:
        overrides["index"] = {"index_path": str(index_dir)}

    with cli_errors():
        config = load_config(obj.get("config_path"), **overrides)

    if not obj.get("verbose"):
        configure_logging(config=config.logging)
    return config


def build_engine(ctx: click.Context, **kwargs: Any) -> NoteEngine:
    config = load_cli_config(ctx, **kwargs)
    return NoteEngine.from_config(config)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Map inkdex errors onto click's exit codes.

    QueryError is the caller's fault (usage error, exit 2); everything else
    exits 1 with the error's message.
    """
    try:
        yield
    except QueryError as e:
        raise click.UsageError(e.message) from e
    except InkdexError as e:
        raise click.ClickException(str(e)) from e
