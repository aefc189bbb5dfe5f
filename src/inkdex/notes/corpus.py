"""Direct corpus reads that bypass the index (``ink list``, ``ink mark list``)."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from inkdex.config.constants import WALK_MAX_DEPTH
from inkdex.core.errors import NoteError
from inkdex.notes.models import Note, normalize_tags
from inkdex.notes.walk import walk_files

logger = structlog.get_logger()


def iter_notes(
    root: Path,
    *,
    recurse: bool = True,
    max_depth: int = WALK_MAX_DEPTH,
    tags: Iterable[str] = (),
    ignore_patterns: Iterable[str] = (),
    include_hidden: bool = True,
) -> Iterator[Note]:
    """Yield parsed notes under ``root`` in walk order.

    With ``tags`` given, only notes carrying at least one of them are yielded.
    Unreadable files are logged and skipped.
    """
    wanted = normalize_tags(tags)
    patterns = list(ignore_patterns)
    for path in walk_files(root, recurse=recurse, max_depth=max_depth):
        try:
            note = Note.from_markdown_file(path)
        except NoteError as e:
            logger.warning("note_skipped", path=str(path), error=str(e))
            continue
        if wanted and not (note.tags & wanted):
            continue
        if not include_hidden and note.is_hidden(patterns, root):
            continue
        yield note


def iter_bookmarks(
    root: Path,
    *,
    recurse: bool = True,
    max_depth: int = WALK_MAX_DEPTH,
) -> Iterator[Note]:
    """Notes whose front matter carries a ``url``."""
    for note in iter_notes(root, recurse=recurse, max_depth=max_depth):
        if note.url:
            yield note
