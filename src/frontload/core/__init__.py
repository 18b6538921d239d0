"""Core infrastructure: configuration, environment detection, logging."""

from frontload.core.config import (
    FrontloadSettings,
    LoggingSettings,
    NodeOptions,
    ProviderSettings,
    RenderSettings,
    load_settings,
    resolve_config,
)
from frontload.core.environment import detect_environment, detect_is_server, is_production

__all__ = [
    "FrontloadSettings",
    "LoggingSettings",
    "NodeOptions",
    "ProviderSettings",
    "RenderSettings",
    "detect_environment",
    "detect_is_server",
    "is_production",
    "load_settings",
    "resolve_config",
]
