"""Config module exports."""

from inkdex.config.loader import default_config_path, load_config
from inkdex.config.models import (
    IndexConfig,
    InkdexConfig,
    LimitsConfig,
    LoggingConfig,
    NotesConfig,
)

__all__ = [
    "load_config",
    "default_config_path",
    "InkdexConfig",
    "NotesConfig",
    "IndexConfig",
    "LimitsConfig",
    "LoggingConfig",
]
