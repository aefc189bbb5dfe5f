"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
They shape the index schema, ranking and refresh policy; changing one changes
what an existing index or an existing query means.

For configurable values, see models.py.
"""

# =============================================================================
# Corpus
# =============================================================================

NOTE_EXTENSION = ".md"
"""File extension of note files."""

WALK_MAX_DEPTH = 3
"""Default depth for recursive note discovery (files directly in the root are depth 1)."""

HIDDEN_TAG = "hidden"
"""Tag that hides a note from default searches."""

BOOKMARK_TAG = "bookmark"
"""Tag added to notes created from a URL."""

# =============================================================================
# Index Schema
# =============================================================================

NGRAM_TOKENIZER = "ngram"
"""Name the typeahead analyzer is registered under on every index open."""

NGRAM_MIN = 2
NGRAM_MAX = 7
"""Typeahead n-gram bounds (inclusive)."""

TAG_FACET_ROOT = "/tag/"
"""Facet path prefix for tags."""

WRITER_HEAP_BYTES = 50_000_000
"""Memory budget for the tantivy index writer."""

# =============================================================================
# Ranking
# =============================================================================

TITLE_BOOST = 2.0
TYPEAHEAD_BOOST = 1.5
BODY_BOOST = 1.0

MIN_RELEVANCE_SCORE = 0.5
"""Relevance-sorted hits scoring below this are dropped."""

SEARCH_MAX_LIMIT = 1000
"""Hard cap on results per search."""

# =============================================================================
# Freshness
# =============================================================================

STALENESS_WINDOW_SEC = 300
"""Index older than this (5 min) triggers a background refresh."""

MARKER_FILENAME = "index_metadata.txt"
"""Last successful commit time, epoch seconds."""

PENDING_FILENAME = "refresh.pending"
"""Launch time of an in-flight background refresh, epoch seconds."""
