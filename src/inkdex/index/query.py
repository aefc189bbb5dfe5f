"""Query parsing, construction and execution.

A raw query such as ``"trip #travel"`` is split into free text (``trip``),
tags (``travel``) and an optional URL. The free text contributes three
should-clauses, in decreasing boost:

- ``title``: exact match on the lower-cased text (2.0)
- ``typeahead_title``: n-gram match on the lower-cased text (1.5)
- ``body``: tantivy's query parser over ``body`` (1.0)

Tags and visibility are must-clauses. Relevance-sorted results drop hits
scoring below ``MIN_RELEVANCE_SCORE`` whenever free text was given.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

import structlog
import tantivy

from inkdex.config.constants import (
    BODY_BOOST,
    MIN_RELEVANCE_SCORE,
    SEARCH_MAX_LIMIT,
    TITLE_BOOST,
    TYPEAHEAD_BOOST,
)
from inkdex.core.errors import QueryError, StorageError
from inkdex.index.schema import note_from_document, tag_facet
from inkdex.notes.models import Note, normalize_tag, slugify

logger = structlog.get_logger()

_URL_RE = re.compile(r"""https?://[^\s/$.?#].[^\s)(\[><"]*""")


class SortOrder(str, Enum):
    """Result ordering."""

    RELEVANCE = "relevance"
    TITLE = "title"
    CREATED = "created"
    MODIFIED = "modified"
    MODIFIED_DESC = "-modified"

    @classmethod
    def parse(cls, value: SortOrder | str | None) -> SortOrder:
        if value is None:
            return cls.RELEVANCE
        if isinstance(value, SortOrder):
            return value
        try:
            return cls(value)
        except ValueError as e:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"unknown sort {value!r}; expected one of {choices}") from e


@dataclass
class ParsedQuery:
    """A raw query split into free text, tags and an optional URL."""

    raw: str
    query: str = ""
    tags: list[str] = field(default_factory=list)
    url: str | None = None

    @classmethod
    def from_query(cls, raw: str) -> ParsedQuery:
        tags: list[str] = []
        words: list[str] = []
        url: str | None = None
        for part in raw.split():
            if part.startswith("#"):
                tags.append(part.lstrip("#"))
            elif _URL_RE.search(part):
                if url is None:
                    url = part
            else:
                words.append(part)
        return cls(raw=raw, query=" ".join(words), tags=tags, url=url)

    @property
    def slug(self) -> str:
        return slugify(self.query)


def normalized_query_tags(tags: list[str]) -> list[str]:
    """Normalise query tags like note tags, rejecting any that end up empty.

    Raises:
        QueryError: A tag has no usable characters left.
    """
    result: list[str] = []
    for tag in tags:
        cleaned = normalize_tag(tag)
        if not cleaned:
            raise QueryError.invalid_tag(tag)
        if cleaned not in result:
            result.append(cleaned)
    return result


def build_query(
    index: tantivy.Index,
    schema: tantivy.Schema,
    parsed: ParsedQuery,
    include_hidden: bool = False,
) -> tantivy.Query:
    """Combine free text, tags and visibility into one boolean query.

    Raises:
        QueryError: The free text does not parse or a tag is unusable.
    """
    clauses: list[tuple[tantivy.Occur, tantivy.Query]] = []

    text = parsed.query.lower()
    if text:
        title_q = tantivy.Query.term_query(schema, "title", text, index_option="basic")
        typeahead_q = tantivy.Query.term_query(
            schema, "typeahead_title", text, index_option="basic"
        )
        try:
            body_q = index.parse_query(text, ["body"])
        except ValueError as e:
            # Tantivy raises ValueError on syntax errors
            raise QueryError.syntax_error(parsed.query, str(e)) from e
        clauses.append((tantivy.Occur.Should, tantivy.Query.boost_query(typeahead_q, TYPEAHEAD_BOOST)))
        clauses.append((tantivy.Occur.Should, tantivy.Query.boost_query(title_q, TITLE_BOOST)))
        clauses.append((tantivy.Occur.Should, tantivy.Query.boost_query(body_q, BODY_BOOST)))

    for tag in normalized_query_tags(parsed.tags):
        facet_q = tantivy.Query.term_query(schema, "tag", tag_facet(tag), index_option="basic")
        clauses.append((tantivy.Occur.Must, facet_q))

    if not include_hidden:
        visible_q = tantivy.Query.term_query(schema, "is_hidden", False, index_option="basic")
        clauses.append((tantivy.Occur.Must, visible_q))

    if not clauses:
        return tantivy.Query.all_query()
    return tantivy.Query.boolean_query(clauses)


def _check_limit(limit: int) -> int:
    if limit < 1:
        raise QueryError.invalid_limit(limit)
    return min(limit, SEARCH_MAX_LIMIT)


def execute(
    index: tantivy.Index,
    schema: tantivy.Schema,
    raw_query: str,
    *,
    include_hidden: bool = False,
    sort: SortOrder | str = SortOrder.RELEVANCE,
    limit: int = 10,
) -> list[Note]:
    """Run ``raw_query`` against the committed generation of ``index``.

    Raises:
        QueryError: Bad syntax, tag or limit.
        StorageError: The searcher fails.
    """
    order = SortOrder.parse(sort)
    limit = _check_limit(limit)
    parsed = ParsedQuery.from_query(raw_query)
    query = build_query(index, schema, parsed, include_hidden=include_hidden)

    index.reload()
    searcher = index.searcher()
    try:
        if order is SortOrder.RELEVANCE:
            hits = searcher.search(query, limit).hits
            if parsed.query:
                hits = [(score, addr) for score, addr in hits if score >= MIN_RELEVANCE_SCORE]
            docs = [searcher.doc(addr) for _score, addr in hits]
        elif order is SortOrder.TITLE:
            hits = searcher.search(query, max(searcher.num_docs, 1)).hits
            docs = [searcher.doc(addr) for _score, addr in hits]
            docs.sort(key=lambda d: (d.get_first("sort_title") or "", d.get_first("path") or ""))
            docs = docs[:limit]
        else:
            field_name = "sort_created" if order is SortOrder.CREATED else "sort_modified"
            direction = (
                tantivy.Order.Desc if order is SortOrder.MODIFIED_DESC else tantivy.Order.Asc
            )
            hits = searcher.search(
                query, limit, order_by_field=field_name, order=direction
            ).hits
            docs = [searcher.doc(addr) for _value, addr in hits]
    except ValueError as e:
        raise StorageError.search_failed(str(e)) from e

    logger.debug(
        "search_executed",
        query=raw_query,
        sort=order.value,
        include_hidden=include_hidden,
        results=len(docs),
    )
    return [note_from_document(doc) for doc in docs]
