"""NoteEngine - explicit handle over one corpus and one index location.

Everything that used to be process-wide (schema, index location, corpus root,
ignore patterns, freshness bookkeeping) hangs off the handle, so tests and
embedders can run several engines side by side.

Usage::

    engine = NoteEngine.from_config(load_config())
    engine.rebuild()
    notes = engine.search("trip #travel", sort="-modified", limit=5)
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import tantivy

from inkdex.config.constants import STALENESS_WINDOW_SEC, WALK_MAX_DEPTH
from inkdex.config.models import InkdexConfig
from inkdex.index.freshness import FreshnessTracker, Launcher, default_launcher, refresh_command
from inkdex.index.indexer import IndexStats, rebuild
from inkdex.index.query import SortOrder, execute
from inkdex.index.schema import build_schema, open_index
from inkdex.notes.models import Note


class NoteEngine:
    """Indexes a note corpus and answers queries against it."""

    def __init__(
        self,
        notes_root: Path,
        index_location: Path,
        *,
        ignore_patterns: Iterable[str] = (),
        recurse: bool = True,
        max_depth: int = WALK_MAX_DEPTH,
        auto_refresh: bool = True,
        staleness_window: float = STALENESS_WINDOW_SEC,
        launcher: Launcher = default_launcher,
    ) -> None:
        self.notes_root = Path(notes_root).expanduser().resolve()
        self.index_location = Path(index_location).expanduser()
        self.ignore_patterns = list(ignore_patterns)
        self.recurse = recurse
        self.max_depth = max_depth
        self.auto_refresh = auto_refresh
        self.schema = build_schema()
        self.freshness = FreshnessTracker(
            self.index_location,
            staleness_window=staleness_window,
            launcher=launcher,
        )
        self._index: tantivy.Index | None = None

    @classmethod
    def from_config(cls, config: InkdexConfig, **kwargs: object) -> NoteEngine:
        """Build an engine from loaded configuration; kwargs override."""
        params: dict[str, object] = {
            "ignore_patterns": config.notes.ignore,
            "recurse": config.notes.recurse,
            "max_depth": config.notes.max_depth,
        }
        params.update(kwargs)
        return cls(config.notes.notes_path, config.index.location, **params)  # type: ignore[arg-type]

    def _open(self) -> tantivy.Index:
        if self._index is None:
            self._index = open_index(self.index_location, self.schema)
        return self._index

    def rebuild(self) -> IndexStats:
        """Re-index the whole corpus in one commit.

        Raises:
            StorageError: The index cannot be opened, locked, or committed.
        """
        return rebuild(
            self.notes_root,
            self.index_location,
            ignore_patterns=self.ignore_patterns,
            recurse=self.recurse,
            max_depth=self.max_depth,
            schema=self.schema,
            freshness=self.freshness,
        )

    def search(
        self,
        raw_query: str,
        *,
        include_hidden: bool = False,
        sort: SortOrder | str = SortOrder.RELEVANCE,
        limit: int = 10,
    ) -> list[Note]:
        """Query the last committed generation.

        A stale index triggers a background rebuild first; this call does not
        wait for it.

        Raises:
            QueryError: Bad syntax, tag or limit.
            StorageError: The index cannot be opened or searched.
        """
        if self.auto_refresh:
            self.freshness.refresh_if_stale(self.refresh_command())
        return execute(
            self._open(),
            self.schema,
            raw_query,
            include_hidden=include_hidden,
            sort=sort,
            limit=limit,
        )

    def document_count(self) -> int:
        index = self._open()
        index.reload()
        return index.searcher().num_docs

    def refresh_command(self) -> list[str]:
        return refresh_command(
            self.notes_root,
            self.index_location,
            ignore_patterns=self.ignore_patterns,
            recurse=self.recurse,
            max_depth=self.max_depth,
        )
