"""Configuration models and loaders."""

from formata.core.config.loader import (
    configure_logging_from_config,
    detect_format,
    load_app_config,
    load_config,
)
from formata.core.config.models import (
    DEFAULT_PALETTE,
    AppConfig,
    EditorConfig,
    LoggingConfig,
    PlaybackConfig,
    TimelineConfig,
)

__all__ = [
    "DEFAULT_PALETTE",
    "AppConfig",
    "EditorConfig",
    "LoggingConfig",
    "PlaybackConfig",
    "TimelineConfig",
    "configure_logging_from_config",
    "detect_format",
    "load_app_config",
    "load_config",
]
