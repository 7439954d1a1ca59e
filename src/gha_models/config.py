from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from gha_models.constants import DEFAULTS
from gha_models.exceptions import ConfigError
from gha_models.logging import get_logger

__all__ = [
    "UnknownKeyPolicy",
    "ParserSettings",
    "load_settings",
]

logger = get_logger(__name__)


class UnknownKeyPolicy(str, Enum):
    """What the parser does with keys no field or alias recognizes."""

    REJECT = "reject"
    WARN = "warn"


class ParserSettings(BaseSettings):
    """Settings for a parse call.

    Values come from (highest priority first) constructor arguments or a
    settings file passed to ``load_settings``, then ``GHA_MODELS_*``
    environment variables, then the defaults below.

    Attributes:
        unknown_keys: ``reject`` fails with UnknownKey; ``warn`` records a
            ParseWarning, logs it, and ignores the key.
        max_depth: Nesting depth past which parsing fails with TooDeeplyNested.
    """

    model_config = SettingsConfigDict(
        env_prefix="GHA_MODELS_",
        extra="ignore",
        frozen=True,
    )

    unknown_keys: UnknownKeyPolicy = UnknownKeyPolicy(DEFAULTS.UNKNOWN_KEYS)
    max_depth: int = Field(default=DEFAULTS.MAX_DEPTH, ge=1, le=10_000)

    @property
    def strict(self) -> bool:
        return self.unknown_keys is UnknownKeyPolicy.REJECT


def _read_settings_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file into a dict of settings values."""
    try:
        with open(path) as f:
            loaded = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if loaded is None:
        logger.warning("settings_file_empty", path=str(path))
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(
            f"Settings file {path} must contain a mapping",
            value=type(loaded).__name__,
        )
    return loaded


def load_settings(
    config_path: Path | None = None, **overrides: Any
) -> ParserSettings:
    """Load parser settings: defaults -> environment -> file -> overrides.

    Args:
        config_path: Optional YAML file with settings keys at the top level.
        **overrides: Explicit values that win over every other source.

    Returns:
        ParserSettings instance with merged configuration.

    Raises:
        ConfigError: If the file cannot be read or a value is invalid.
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_read_settings_file(config_path))
    values.update(overrides)

    try:
        return ParserSettings(**values)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid settings: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
