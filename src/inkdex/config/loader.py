"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (INKDEX__SECTION__KEY)
3. User config ($XDG_CONFIG_HOME/inkdex/config.yaml)
4. Built-in defaults (lowest priority)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from inkdex.config.models import (
    IndexConfig,
    InkdexConfig,
    LimitsConfig,
    LoggingConfig,
    NotesConfig,
)
from inkdex.core.errors import ConfigError


def default_config_path() -> Path:
    """``$XDG_CONFIG_HOME/inkdex/config.yaml`` or ``~/.config/inkdex/config.yaml``."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path("~/.config").expanduser()
    return base / "inkdex" / "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class InkdexSettings(BaseSettings):
        """Root config. Env vars: INKDEX__LOGGING__LEVEL, INKDEX__NOTES__NOTES_DIR, etc."""

        model_config = SettingsConfigDict(
            env_prefix="INKDEX__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        notes: NotesConfig = NotesConfig()
        index: IndexConfig = IndexConfig()
        limits: LimitsConfig = LimitsConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return InkdexSettings


def load_config(config_path: Path | None = None, **kwargs: Any) -> InkdexConfig:
    """Load config: defaults < YAML file < env vars < kwargs.

    Args:
        config_path: YAML file to read. Defaults to the XDG config location;
                     a missing file is not an error.
        **kwargs: Override values per section (highest precedence), e.g.
                  ``notes={"notes_dir": "/tmp/notes"}``.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    yaml_config = _load_yaml(config_path or default_config_path())

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
        return InkdexConfig.model_validate(settings.model_dump())
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
