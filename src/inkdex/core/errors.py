"""Inkdex error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index storage
- 4xxx: Query
- 5xxx: Note (per-item corpus errors)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Index storage (3xxx)
    INDEX_OPEN_FAILED = 3001
    INDEX_SCHEMA_MISMATCH = 3002
    INDEX_LOCKED = 3003
    INDEX_COMMIT_FAILED = 3004
    INDEX_SEARCH_FAILED = 3005

    # Query (4xxx)
    QUERY_SYNTAX_ERROR = 4001
    QUERY_INVALID_TAG = 4002
    QUERY_INVALID_LIMIT = 4003

    # Note (5xxx)
    NOTE_READ_ERROR = 5001
    NOTE_NO_PATH = 5002


@dataclass(frozen=True)
class InkdexError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'QUERY_SYNTAX_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(InkdexError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class StorageError(InkdexError):
    """Index storage errors. Fatal to the rebuild or search in progress."""

    @classmethod
    def open_failed(cls, path: str, reason: str) -> "StorageError":
        return cls(
            code=ErrorCode.INDEX_OPEN_FAILED,
            message=f"Cannot open or create index at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def schema_mismatch(cls, path: str, reason: str) -> "StorageError":
        return cls(
            code=ErrorCode.INDEX_SCHEMA_MISMATCH,
            message=f"Index at {path} was built with a different schema: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def locked(cls, path: str, reason: str) -> "StorageError":
        return cls(
            code=ErrorCode.INDEX_LOCKED,
            message=f"Index at {path} is being written by another process",
            retryable=True,
            details={"path": path, "reason": reason},
        )

    @classmethod
    def commit_failed(cls, path: str, reason: str) -> "StorageError":
        return cls(
            code=ErrorCode.INDEX_COMMIT_FAILED,
            message=f"Failed to commit index at {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )

    @classmethod
    def search_failed(cls, reason: str) -> "StorageError":
        return cls(
            code=ErrorCode.INDEX_SEARCH_FAILED,
            message=f"Search failed: {reason}",
            details={"reason": reason},
        )


class QueryError(InkdexError):
    """Bad query input. The caller can fix the query and retry."""

    @classmethod
    def syntax_error(cls, query: str, reason: str) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_SYNTAX_ERROR,
            message=f"Could not parse query '{query}': {reason}",
            details={"query": query, "reason": reason},
        )

    @classmethod
    def invalid_tag(cls, tag: str) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_INVALID_TAG,
            message=f"Tag filter {tag!r} has no usable characters",
            details={"tag": tag},
        )

    @classmethod
    def invalid_limit(cls, limit: int) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_INVALID_LIMIT,
            message=f"Limit must be a positive integer, got {limit}",
            details={"limit": limit},
        )


class NoteError(InkdexError):
    """Per-note errors. The indexer logs and skips these."""

    @classmethod
    def read_error(cls, path: str, reason: str) -> "NoteError":
        return cls(
            code=ErrorCode.NOTE_READ_ERROR,
            message=f"Failed to read note {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def no_path(cls, note_id: str) -> "NoteError":
        return cls(
            code=ErrorCode.NOTE_NO_PATH,
            message=f"Note '{note_id}' is not backed by a file",
            details={"id": note_id},
        )
