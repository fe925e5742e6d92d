"""
Configuration loader for custom death logger settings.

Allows users to provide overrides and static snapshots via YAML files.
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, Optional, Any

from . import wow_data
from .settings import Settings, parse_max_entries, parse_window_seconds, InvalidSettingError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and applies custom configuration from YAML files."""

    @staticmethod
    def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to custom config file. If None, looks for:
                        1. deathlog.yaml in current directory
                        2. config/deathlog.yaml
                        3. ~/.deathlogger/deathlog.yaml

        Returns:
            Configuration dictionary
        """
        search_paths = [
            Path("deathlog.yaml"),
            Path("config/deathlog.yaml"),
            Path.home() / ".deathlogger" / "deathlog.yaml",
        ]

        if config_path:
            search_paths.insert(0, Path(config_path))

        for path in search_paths:
            if path.exists():
                try:
                    with open(path, "r") as f:
                        config = yaml.safe_load(f) or {}
                        logger.info(f"Loaded configuration from {path}")
                        return config
                except (OSError, yaml.YAMLError) as e:
                    logger.error(f"Failed to load config from {path}: {e}")

        logger.debug("No custom configuration file found, using defaults")
        return {}

    @staticmethod
    def apply_config(config: Dict[str, Any], settings: Optional[Settings] = None) -> Dict[str, Any]:
        """
        Apply custom configuration.

        WoW data overrides are merged into the wow_data tables; tracking
        overrides are written onto ``settings`` when one is given.

        Args:
            config: Configuration dictionary from YAML
            settings: Optional settings object to update in place

        Returns:
            The static provider blocks (identity, location, money) found in the config
        """
        if "difficulties" in config:
            for diff_id, name in config["difficulties"].items():
                try:
                    diff_id = int(diff_id)
                    wow_data.DIFFICULTY_NAMES[diff_id] = name
                    logger.debug(f"Added custom difficulty: {diff_id} = {name}")
                except (ValueError, TypeError) as e:
                    logger.warning(f"Invalid difficulty ID {diff_id}: {e}")

        if "specializations" in config:
            for spec_id, name in config["specializations"].items():
                try:
                    spec_id = int(spec_id)
                    wow_data.ALL_SPECS[spec_id] = name
                    logger.debug(f"Added custom spec: {spec_id} = {name}")
                except (ValueError, TypeError) as e:
                    logger.warning(f"Invalid spec ID {spec_id}: {e}")

        if settings is not None:
            if "window_seconds" in config:
                try:
                    settings.window_seconds = parse_window_seconds(config["window_seconds"])
                except InvalidSettingError as e:
                    logger.warning(f"Ignoring window_seconds={config['window_seconds']!r}: {e}")
            if "max_entries" in config:
                try:
                    settings.max_entries = parse_max_entries(config["max_entries"])
                except InvalidSettingError as e:
                    logger.warning(f"Ignoring max_entries={config['max_entries']!r}: {e}")

        return {
            key: config[key]
            for key in ("identity", "location", "money")
            if key in config
        }


def load_and_apply_config(
    config_path: Optional[str] = None, settings: Optional[Settings] = None
) -> Dict[str, Any]:
    """
    Load and apply configuration in one step.

    Args:
        config_path: Optional path to custom config file
        settings: Optional settings object to update in place

    Returns:
        Static provider blocks from the config (may be empty)
    """
    loader = ConfigLoader()
    config = loader.load_config(config_path)
    if not config:
        return {}
    return loader.apply_config(config, settings)
