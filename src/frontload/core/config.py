# src/frontload/core/config.py
"""
Configuration schema and loading for frontload.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import re
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from frontload.contracts.errors import ConfigFileError
from frontload.contracts.events import DepthExceeded
from frontload.core.environment import is_production

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

# Variables read by core.environment share the FRONTLOAD_ prefix with
# settings overrides; they are not settings keys.
_NON_SETTINGS_KEYS = frozenset({"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES", "ENV", "RUNTIME"})


class NodeOptions(BaseModel):
    """Options attached to one fetch function at one tree position.

    Example:
        connect(load_comments, NodeOptions(on_update=True))
    """

    model_config = {"frozen": True, "extra": "forbid"}

    on_mount: bool = Field(
        default=True,
        description="Run the fetch when the node mounts",
    )
    on_update: bool = Field(
        default=False,
        description="Run the fetch when the node updates (client only in practice)",
    )
    no_server_render: bool = Field(
        default=False,
        description="Never run on the server; run on the first client render instead",
    )


class ProviderSettings(BaseModel):
    """Settings for one Provider (one logical render root)."""

    model_config = {"frozen": True, "extra": "forbid"}

    is_server: bool | None = Field(
        default=None,
        description="Force server/client mode; None auto-detects from FRONTLOAD_RUNTIME",
    )
    no_server_render: bool = Field(
        default=False,
        description="Disable server loading for every node under this provider",
    )
    with_logging: bool = Field(
        default=False,
        description="Log push decisions and the first-render latch",
    )
    name: str | None = Field(
        default=None,
        description="Provider name used as a log prefix",
    )


class RenderSettings(BaseModel):
    """Settings for the render-pass coordinator.

    max_passes bounds the depth of nested loaders that a server render will
    resolve. The default of 1 is a single pass: one dry run, one flush, one
    final render.

    Example YAML:
        render:
          max_passes: 3
          with_logging: false
    """

    model_config = {"frozen": True, "extra": "forbid"}

    max_passes: int = Field(
        default=1,
        ge=1,
        description="Maximum dry-run/flush passes before rendering a partial result",
    )
    with_logging: bool | None = Field(
        default=None,
        description="Log each pass; None means enabled unless FRONTLOAD_ENV=production",
    )
    on_diagnostic: Callable[[DepthExceeded], None] | None = Field(
        default=None,
        exclude=True,
        description="Called once when the pass budget is exhausted with loads pending",
    )

    @property
    def logging_enabled(self) -> bool:
        if self.with_logging is None:
            return not is_production()
        return self.with_logging


class LoggingSettings(BaseModel):
    """Logging output configuration (consumed by core.logging)."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class FrontloadSettings(BaseModel):
    """Top-level settings file schema."""

    model_config = {"frozen": True, "extra": "forbid"}

    render: RenderSettings = Field(default_factory=RenderSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as-is, so validation reports
    them against the field they were meant for.
    """
    import os

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        if match.group(2) is not None:
            return match.group(2)
        return match.group(0)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_VAR_PATTERN.sub(replacer, value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lower_keys(value: Any) -> Any:
    # Dynaconf uppercases keys coming from environment variables
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def load_settings(config_path: Path) -> FrontloadSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence (highest first):
    1. Environment variables (FRONTLOAD_RENDER__MAX_PASSES=3 for nested keys)
    2. The YAML file
    3. Defaults from the Pydantic schema

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated FrontloadSettings instance

    Raises:
        ConfigFileError: If the file doesn't exist
        ValidationError: If configuration fails Pydantic validation
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise ConfigFileError(str(config_path), "file not found")

    dynaconf_settings = Dynaconf(
        envvar_prefix="FRONTLOAD",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    raw_config = {
        k: v for k, v in dynaconf_settings.as_dict().items() if k.upper() not in _NON_SETTINGS_KEYS
    }
    raw_config = _lower_keys(raw_config)
    raw_config = _expand_env_vars(raw_config)

    return FrontloadSettings(**raw_config)


def resolve_config(settings: FrontloadSettings) -> dict[str, Any]:
    """Convert validated settings to a JSON-ready dict (explicit + defaults)."""
    return settings.model_dump(mode="json")
