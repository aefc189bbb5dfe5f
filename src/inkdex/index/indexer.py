"""Full index rebuild from the note corpus.

A rebuild is one writer pass ending in a single commit:

1. open (or create) the index and take the writer lock
2. walk the corpus; parse, classify and upsert each note by path
3. delete documents whose files were not seen in this pass
4. commit, reload, count, write the freshness marker

Per-note failures are logged and skipped. Storage failures abort the pass and
leave the previous generation readable.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
import tantivy

from inkdex.config.constants import WALK_MAX_DEPTH, WRITER_HEAP_BYTES
from inkdex.core.errors import NoteError, StorageError
from inkdex.index.freshness import FreshnessTracker
from inkdex.index.schema import build_schema, note_to_document, open_index
from inkdex.notes.models import Note
from inkdex.notes.walk import walk_files

logger = structlog.get_logger()


@dataclass
class IndexStats:
    """Outcome of one rebuild pass."""

    document_count: int = 0
    indexed: int = 0
    skipped: int = 0
    removed: int = 0
    errors: list[str] = field(default_factory=list)
    duration: float = 0.0


def _indexed_paths(index: tantivy.Index) -> set[str]:
    """Every ``path`` value in the committed generation."""
    index.reload()
    searcher = index.searcher()
    if searcher.num_docs == 0:
        return set()
    hits = searcher.search(tantivy.Query.all_query(), limit=searcher.num_docs).hits
    paths: set[str] = set()
    for _score, addr in hits:
        path = searcher.doc(addr).get_first("path")
        if path:
            paths.add(path)
    return paths


def rebuild(
    corpus_root: Path,
    index_location: Path,
    *,
    ignore_patterns: Iterable[str] = (),
    recurse: bool = True,
    max_depth: int = WALK_MAX_DEPTH,
    schema: tantivy.Schema | None = None,
    freshness: FreshnessTracker | None = None,
) -> IndexStats:
    """Rebuild the index at ``index_location`` from the notes under ``corpus_root``.

    Raises:
        StorageError: The index cannot be opened, is locked by another
            writer, or the commit fails.
    """
    start = time.monotonic()
    corpus_root = Path(corpus_root).expanduser().resolve()
    index_location = Path(index_location).expanduser()
    patterns = list(ignore_patterns)
    schema = schema or build_schema()
    freshness = freshness or FreshnessTracker(index_location)

    index = open_index(index_location, schema)
    stale_paths = _indexed_paths(index)

    try:
        writer = index.writer(WRITER_HEAP_BYTES)
    except ValueError as e:
        raise StorageError.locked(str(index_location), str(e)) from e

    stats = IndexStats()
    seen: set[str] = set()

    if not corpus_root.is_dir():
        logger.warning("corpus_missing", root=str(corpus_root))

    for path in walk_files(corpus_root, recurse=recurse, max_depth=max_depth):
        try:
            note = Note.from_markdown_file(path)
            hidden = note.is_hidden(patterns, corpus_root)
            doc = note_to_document(note, hidden=hidden)
            key = str(note.file_path())
            writer.delete_documents_by_term("path", key)
            writer.add_document(doc)
        except (NoteError, ValueError) as e:
            stats.skipped += 1
            stats.errors.append(f"{path}: {e}")
            logger.warning("note_skipped", path=str(path), error=str(e))
            continue
        seen.add(key)
        stats.indexed += 1

    for path in sorted(stale_paths - seen):
        writer.delete_documents_by_term("path", path)
        stats.removed += 1
        logger.debug("note_removed", path=path)

    try:
        writer.commit()
    except (OSError, ValueError) as e:
        try:
            writer.rollback()
        except ValueError as rollback_error:
            logger.error("rollback_failed", error=str(rollback_error))
        raise StorageError.commit_failed(str(index_location), str(e)) from e
    writer.wait_merging_threads()

    index.reload()
    stats.document_count = index.searcher().num_docs
    try:
        freshness.mark_fresh()
    except OSError as e:
        # The generation is committed; the next search just sees it as stale.
        logger.warning("freshness_marker_write_failed", error=str(e))
    stats.duration = time.monotonic() - start

    logger.info(
        "index_rebuilt",
        root=str(corpus_root),
        documents=stats.document_count,
        indexed=stats.indexed,
        skipped=stats.skipped,
        removed=stats.removed,
        duration_ms=int(stats.duration * 1000),
    )
    return stats
