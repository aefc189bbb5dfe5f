"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (INKDEX__SECTION__KEY)
3. YAML config ($XDG_CONFIG_HOME/inkdex/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    INKDEX__<SECTION>__<KEY>=<VALUE>

Examples:
    INKDEX__LOGGING__LEVEL=DEBUG
    INKDEX__NOTES__NOTES_DIR=~/notes
    INKDEX__INDEX__INDEX_PATH=/tmp/inkdex
    INKDEX__LIMITS__SEARCH_DEFAULT=25
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from inkdex.config.constants import SEARCH_MAX_LIMIT, WALK_MAX_DEPTH

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def default_cache_dir() -> Path:
    """``$XDG_CACHE_HOME/inkdex`` or ``~/.cache/inkdex``."""
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path("~/.cache").expanduser()
    return base / "inkdex"


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        INKDEX__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Per-note indexing problems are logged at WARNING.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class NotesConfig(BaseModel):
    """Note corpus configuration.

    Env vars:
        INKDEX__NOTES__NOTES_DIR: Root directory of the note collection
        INKDEX__NOTES__RECURSE: Descend into sub-directories
        INKDEX__NOTES__MAX_DEPTH: Deepest directory level searched for notes
    """

    notes_dir: str = Field(
        default="~/notes",
        description="Root directory of the note collection. '~' is expanded.",
    )
    recurse: bool = Field(
        default=True,
        description="Descend into sub-directories of notes_dir.",
    )
    max_depth: int = Field(
        default=WALK_MAX_DEPTH,
        description="Deepest directory level searched when recurse is on (root is 0).",
    )
    ignore: list[str] = Field(
        default_factory=list,
        description="Glob patterns, relative to notes_dir, for notes hidden from "
        "default searches (e.g. 'archive/**').",
    )

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_depth must be >= 1, got {v}")
        return v

    @property
    def notes_path(self) -> Path:
        return Path(self.notes_dir).expanduser()


class IndexConfig(BaseModel):
    """Index configuration.

    Env vars:
        INKDEX__INDEX__INDEX_PATH: Override index storage location
    """

    index_path: str | None = Field(
        default=None,
        description="Override index storage location. Default: $XDG_CACHE_HOME/inkdex.",
    )

    @property
    def location(self) -> Path:
        if self.index_path:
            return Path(self.index_path).expanduser()
        return default_cache_dir()


class LimitsConfig(BaseModel):
    """Query limit defaults.

    See constants.py for hard maximums that cannot be exceeded.

    Env vars:
        INKDEX__LIMITS__SEARCH_DEFAULT: Default search results
    """

    search_default: int = Field(
        default=10,
        description="Default number of search results.",
    )

    @field_validator("search_default")
    @classmethod
    def validate_search_default(cls, v: int) -> int:
        if not (1 <= v <= SEARCH_MAX_LIMIT):
            raise ValueError(f"search_default must be 1-{SEARCH_MAX_LIMIT}, got {v}")
        return v


class InkdexConfig(BaseModel):
    """Root configuration for Inkdex.

    All settings can be configured via:
    1. Environment variables: INKDEX__SECTION__KEY
    2. The YAML config file
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    notes: NotesConfig = Field(default_factory=NotesConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
