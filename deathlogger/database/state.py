"""
Persisted state for the death logger.

The state file mirrors the addon's SavedVariables table: the death
records plus the capacity and screenshot settings.
"""

import os
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config.settings import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_SCREENSHOT_DELAY,
    DEFAULT_SCREENSHOT_ON,
)
from ..models.records import DeathRecord

logger = logging.getLogger(__name__)


class StateFileError(Exception):
    """Raised when the state file exists but cannot be read."""


class PersistedState(BaseModel):
    """On-disk layout of the death logger state."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    deaths: List[Dict[str, Any]] = Field(default_factory=list, description="Death entries, oldest first")
    max_entries: int = Field(DEFAULT_MAX_ENTRIES, alias="maxEntries", ge=1)
    screenshot_on: bool = Field(DEFAULT_SCREENSHOT_ON, alias="screenshotOn")
    screenshot_delay: float = Field(DEFAULT_SCREENSHOT_DELAY, alias="screenshotDelay", ge=0)

    def records(self) -> List[DeathRecord]:
        """
        Decode the stored entries into records.

        Raises:
            StateFileError: If an entry is missing required fields
        """
        try:
            return [DeathRecord.from_dict(entry) for entry in self.deaths]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StateFileError(f"Malformed death entry: {e}") from e

    @classmethod
    def from_records(
        cls,
        records: List[DeathRecord],
        max_entries: int = DEFAULT_MAX_ENTRIES,
        screenshot_on: bool = DEFAULT_SCREENSHOT_ON,
        screenshot_delay: float = DEFAULT_SCREENSHOT_DELAY,
    ) -> "PersistedState":
        return cls(
            deaths=[record.to_dict() for record in records],
            max_entries=max_entries,
            screenshot_on=screenshot_on,
            screenshot_delay=screenshot_delay,
        )


def load_state(path: str) -> PersistedState:
    """
    Load state from disk, filling in defaults.

    A missing file yields a fresh default state; missing keys get their
    default values.

    Raises:
        StateFileError: If the file exists but is not valid state JSON
    """
    state_path = Path(path)
    if not state_path.exists():
        logger.info(f"No state file at {state_path}, starting with defaults")
        return PersistedState()

    try:
        with open(state_path, "r", encoding="utf-8") as f:
            state = PersistedState.model_validate_json(f.read() or "{}")
    except (OSError, ValidationError) as e:
        logger.warning(f"Unreadable state file {state_path}: {e}")
        raise StateFileError(f"Cannot read state file {state_path}: {e}") from e

    logger.info(f"Loaded {len(state.deaths)} death records from {state_path}")
    return state


def save_state(path: str, state: PersistedState):
    """Write state to disk, replacing the previous file atomically."""
    state_path = Path(path)
    state_path.parent.mkdir(parents=True, exist_ok=True)

    payload = state.model_dump(by_alias=True)

    fd, tmp_name = tempfile.mkstemp(prefix=".state-", suffix=".json", dir=state_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        os.replace(tmp_name, state_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Saved {len(state.deaths)} death records to {state_path}")
