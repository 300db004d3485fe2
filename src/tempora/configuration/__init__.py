"""Configuration loading utilities for tempora."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    DisplaySettings,
    LoggingSettings,
    ParserSettings,
    Settings,
    bootstrap_settings,
    load_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DisplaySettings",
    "LoggingSettings",
    "ParserSettings",
    "Settings",
    "bootstrap_settings",
    "load_settings",
    "save_settings",
]
