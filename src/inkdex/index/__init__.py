"""Index module - tantivy storage, rebuild and query.

- schema: field layout, tokenizers, Note <-> document encoding
- indexer: full rebuild in one commit
- freshness: last-built marker and background refresh
- query: query parsing, construction and execution
- engine: NoteEngine, the handle tying the above together
"""

from inkdex.index.engine import NoteEngine
from inkdex.index.freshness import FreshnessTracker
from inkdex.index.indexer import IndexStats, rebuild
from inkdex.index.query import ParsedQuery, SortOrder, build_query
from inkdex.index.schema import build_schema, open_index

__all__ = [
    "NoteEngine",
    "FreshnessTracker",
    "IndexStats",
    "rebuild",
    "ParsedQuery",
    "SortOrder",
    "build_query",
    "build_schema",
    "open_index",
]
