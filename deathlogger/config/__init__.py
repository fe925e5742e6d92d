"""
Configuration module for the death logger.

Provides environment settings, value validation for user-facing commands,
YAML overrides and WoW data tables.
"""

from .settings import (
    Settings,
    InvalidSettingError,
    parse_window_seconds,
    parse_max_entries,
    parse_screenshot_delay,
    parse_screenshot_on,
    DEFAULT_WINDOW_SECONDS,
    DEFAULT_MAX_ENTRIES,
    DEFAULT_SCREENSHOT_ON,
    DEFAULT_SCREENSHOT_DELAY,
)
from .loader import ConfigLoader, load_and_apply_config

__all__ = [
    "Settings",
    "InvalidSettingError",
    "parse_window_seconds",
    "parse_max_entries",
    "parse_screenshot_delay",
    "parse_screenshot_on",
    "DEFAULT_WINDOW_SECONDS",
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_SCREENSHOT_ON",
    "DEFAULT_SCREENSHOT_DELAY",
    "ConfigLoader",
    "load_and_apply_config",
]
