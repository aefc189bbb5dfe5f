"""Inkdex - personal note indexing and query engine."""

__version__ = "0.1.0"

from inkdex.core.errors import (  # noqa: E402
    ConfigError,
    ErrorCode,
    InkdexError,
    NoteError,
    QueryError,
    StorageError,
)
from inkdex.index.engine import NoteEngine  # noqa: E402
from inkdex.index.query import SortOrder  # noqa: E402
from inkdex.notes.models import Note  # noqa: E402

__all__ = [
    "__version__",
    "NoteEngine",
    "Note",
    "SortOrder",
    "ErrorCode",
    "InkdexError",
    "ConfigError",
    "StorageError",
    "QueryError",
    "NoteError",
]
