"""Tantivy document schema for notes.

One schema serves both the indexer and the query engine. It is built once per
:class:`~inkdex.index.engine.NoteEngine`; an on-disk index created with a
different field set is refused with ``StorageError.schema_mismatch``.

Fields:

- ``title``: exact (raw) term, stored
- ``sort_title``: lower-cased title, stored, used for ``sort=title``
- ``typeahead_title``: lower-cased title, n-gram tokenized (2..7), stored
- ``body``: body text plus lower-cased title, English stemmer, not stored
- ``path``: exact term, stored; document identity for upserts
- ``url``: exact term, stored (bookmarks)
- ``tag``: facet, one ``/tag/<name>`` per tag, indexed only
- ``tag_path``: the same ``/tag/<name>`` strings, stored, for projection
- ``is_hidden``: bool, stored, indexed, fast
- ``created`` / ``modified``: dates, stored and indexed
- ``sort_created`` / ``sort_modified``: epoch seconds, fast, for ordering
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
import tantivy

from inkdex.config.constants import (
    NGRAM_MAX,
    NGRAM_MIN,
    NGRAM_TOKENIZER,
    TAG_FACET_ROOT,
)
from inkdex.core.errors import StorageError
from inkdex.notes.models import Note, id_from_path, normalize_tags

logger = structlog.get_logger()

TANTIVY_DIRNAME = "tantivy"


def build_schema() -> tantivy.Schema:
    """Build the note schema."""
    schema_builder = tantivy.SchemaBuilder()
    schema_builder.add_text_field("title", stored=True, tokenizer_name="raw")
    schema_builder.add_text_field("sort_title", stored=True, tokenizer_name="raw")
    schema_builder.add_text_field(
        "typeahead_title",
        stored=True,
        tokenizer_name=NGRAM_TOKENIZER,
        index_option="position",
    )
    schema_builder.add_text_field("body", stored=False, tokenizer_name="en_stem")
    schema_builder.add_text_field("path", stored=True, tokenizer_name="raw")
    schema_builder.add_text_field("url", stored=True, tokenizer_name="raw")
    schema_builder.add_facet_field("tag")
    schema_builder.add_text_field("tag_path", stored=True, tokenizer_name="raw")
    schema_builder.add_boolean_field("is_hidden", stored=True, indexed=True, fast=True)
    schema_builder.add_date_field("created", stored=True, indexed=True)
    schema_builder.add_date_field("modified", stored=True, indexed=True)
    schema_builder.add_unsigned_field("sort_created", fast=True)
    schema_builder.add_unsigned_field("sort_modified", fast=True)
    return schema_builder.build()


def build_typeahead_analyzer() -> tantivy.TextAnalyzer:
    """Case-folded n-grams of every length between NGRAM_MIN and NGRAM_MAX."""
    return (
        tantivy.TextAnalyzerBuilder(
            tantivy.Tokenizer.ngram(min_gram=NGRAM_MIN, max_gram=NGRAM_MAX, prefix_only=False)
        )
        .filter(tantivy.Filter.lowercase())
        .build()
    )


def tantivy_path(index_location: Path) -> Path:
    """Directory holding the tantivy files inside the index location."""
    return Path(index_location) / TANTIVY_DIRNAME


def open_index(index_location: Path, schema: tantivy.Schema) -> tantivy.Index:
    """Open the index at ``index_location``, creating it if needed.

    Raises:
        StorageError: The directory cannot be created, the index cannot be
            opened, or it was built with a different schema.
    """
    path = tantivy_path(index_location)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError.open_failed(str(path), str(e)) from e

    existed = tantivy.Index.exists(str(path))
    try:
        index = tantivy.Index(schema, path=str(path), reuse=True)
    except ValueError as e:
        reason = str(e)
        if existed and "schema" in reason.lower():
            raise StorageError.schema_mismatch(str(path), reason) from e
        raise StorageError.open_failed(str(path), reason) from e

    if not existed:
        logger.info("index_created", path=str(path))
    index.register_tokenizer(NGRAM_TOKENIZER, build_typeahead_analyzer())
    return index


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def tag_facet(tag: str) -> tantivy.Facet:
    """``work`` -> ``/tag/work``. ``tag`` must already be normalised."""
    return tantivy.Facet.from_string(f"{TAG_FACET_ROOT}{tag}")


def _epoch_seconds(value: datetime | None) -> int:
    if value is None:
        return 0
    return max(int(value.timestamp()), 0)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def note_to_document(note: Note, *, hidden: bool) -> tantivy.Document:
    """Project a note onto the schema.

    Raises:
        NoteError: The note has no path (only file-backed notes are indexed).
    """
    path = str(note.file_path())
    title_lower = note.title.lower()

    doc = tantivy.Document()
    doc.add_text("title", note.title)
    doc.add_text("sort_title", title_lower)
    doc.add_text("typeahead_title", title_lower)
    doc.add_text("path", path)
    if note.url:
        doc.add_text("url", note.url)
    doc.add_text("body", f"{note.body or ''} {title_lower}")
    doc.add_boolean("is_hidden", hidden)
    for tag in sorted(note.tags):
        doc.add_facet("tag", tag_facet(tag))
        doc.add_text("tag_path", f"{TAG_FACET_ROOT}{tag}")
    if note.created is not None:
        doc.add_date("created", _as_utc(note.created))
    if note.modified is not None:
        doc.add_date("modified", _as_utc(note.modified))
    doc.add_unsigned("sort_created", _epoch_seconds(note.created))
    doc.add_unsigned("sort_modified", _epoch_seconds(note.modified))
    return doc


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def facet_to_tag(value: Any) -> str:
    """``/tag/work`` (Facet or str) -> ``work``."""
    text = value.to_path_str() if isinstance(value, tantivy.Facet) else str(value)
    if text.startswith(TAG_FACET_ROOT):
        return text[len(TAG_FACET_ROOT) :]
    return text.lstrip("/")


def decode_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=UTC)
    return None


def note_from_document(doc: tantivy.Document) -> Note:
    """Rebuild a Note from a stored document. ``body`` is not stored.

    Facets are not stored by tantivy, so tags come from ``tag_path``.
    """
    path = doc.get_first("path") or ""
    return Note(
        id=id_from_path(path),
        title=doc.get_first("title") or "",
        path=path or None,
        tags=normalize_tags(facet_to_tag(v) for v in doc.get_all("tag_path")),
        url=doc.get_first("url"),
        created=decode_datetime(doc.get_first("created")),
        modified=decode_datetime(doc.get_first("modified")),
        hidden=bool(doc.get_first("is_hidden")),
    )
