"""
Configuration settings for the death logger.

Handles environment variables and the validation of user-supplied values
for the tracking window, record capacity and screenshot options.
"""

import os
import logging
from typing import Any, Optional
from pathlib import Path
from dataclasses import dataclass


DEFAULT_WINDOW_SECONDS = 6.0
DEFAULT_MAX_ENTRIES = 200
DEFAULT_SCREENSHOT_ON = True
DEFAULT_SCREENSHOT_DELAY = 0.5
DEFAULT_STATE_PATH = str(Path.home() / ".deathlogger" / "state.json")


class InvalidSettingError(ValueError):
    """Raised when a user-supplied setting value is rejected."""

    def __init__(self, setting: str, value: Any, message: str):
        super().__init__(message)
        self.setting = setting
        self.value = value


def _to_float(setting: str, value: Any, message: str) -> float:
    if isinstance(value, bool):
        raise InvalidSettingError(setting, value, message)
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise InvalidSettingError(setting, value, message)
    if result != result or result in (float("inf"), float("-inf")):
        raise InvalidSettingError(setting, value, message)
    return result


def parse_window_seconds(value: Any) -> float:
    """Validate a window length in seconds (must be positive)."""
    seconds = _to_float("window_seconds", value, "Invalid window value.")
    if seconds <= 0:
        raise InvalidSettingError("window_seconds", value, "Invalid window value.")
    return seconds


def parse_max_entries(value: Any) -> int:
    """Validate a record capacity (whole number, at least 1)."""
    message = "Invalid capacity value."
    if isinstance(value, bool):
        raise InvalidSettingError("max_entries", value, message)
    if isinstance(value, int):
        entries = value
    else:
        try:
            entries = int(str(value).strip())
        except ValueError:
            raise InvalidSettingError("max_entries", value, message)
    if entries < 1:
        raise InvalidSettingError("max_entries", value, message)
    return entries


def parse_screenshot_delay(value: Any) -> float:
    """Validate a screenshot delay in seconds (zero or more)."""
    delay = _to_float("screenshot_delay", value, "Invalid delay value.")
    if delay < 0:
        raise InvalidSettingError("screenshot_delay", value, "Invalid delay value.")
    return delay


def parse_screenshot_on(value: Any) -> bool:
    """Validate an on/off toggle."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("on", "true", "1", "yes"):
        return True
    if text in ("off", "false", "0", "no"):
        return False
    raise InvalidSettingError("screenshot_on", value, "Invalid screenshot toggle.")


@dataclass
class Settings:
    """Runtime settings for the death logger."""

    state_path: str = DEFAULT_STATE_PATH
    window_seconds: float = DEFAULT_WINDOW_SECONDS
    max_entries: int = DEFAULT_MAX_ENTRIES
    log_level: str = "info"
    config_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            state_path=os.getenv("DEATHLOG_STATE_PATH", DEFAULT_STATE_PATH),
            window_seconds=parse_window_seconds(
                os.getenv("DEATHLOG_WINDOW_SECONDS", str(DEFAULT_WINDOW_SECONDS))
            ),
            max_entries=parse_max_entries(
                os.getenv("DEATHLOG_MAX_ENTRIES", str(DEFAULT_MAX_ENTRIES))
            ),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
            config_path=os.getenv("DEATHLOG_CONFIG") or None,
        )

    def setup_logging(self):
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def log_configuration(self):
        """Log current configuration."""
        logger = logging.getLogger(__name__)

        logger.info("=== Death Logger Configuration ===")
        logger.info(f"State file: {self.state_path}")
        logger.info(f"Damage window: {self.window_seconds:.1f}s")
        logger.info(f"Max entries: {self.max_entries}")
        logger.info(f"Config file: {self.config_path or '(search paths)'}")
        logger.info("=== End Configuration ===")
