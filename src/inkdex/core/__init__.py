"""Core module exports."""

from inkdex.core.errors import (
    ConfigError,
    ErrorCode,
    InkdexError,
    NoteError,
    QueryError,
    StorageError,
)
from inkdex.core.logging import configure_logging, get_logger
from inkdex.core.progress import spinner, status

__all__ = [
    # Errors
    "ErrorCode",
    "InkdexError",
    "ConfigError",
    "StorageError",
    "QueryError",
    "NoteError",
    # Logging
    "configure_logging",
    "get_logger",
    # Progress
    "spinner",
    "status",
]
