"""
Inbound messages and the single dispatch point that processes them.

The host hands over damage events, death notifications and setting
changes one at a time; dispatch() handles each to completion before the
next one, so a death is always recorded before new damage arrives.
"""

import time
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

from ..analyzer.recorder import DeathRecorder
from ..config.settings import (
    DEFAULT_SCREENSHOT_DELAY,
    DEFAULT_SCREENSHOT_ON,
    DEFAULT_WINDOW_SECONDS,
    InvalidSettingError,
    parse_max_entries,
    parse_screenshot_delay,
    parse_screenshot_on,
    parse_window_seconds,
)
from ..database.state import PersistedState
from ..database.store import DeathRecordStore
from ..models.records import DeathRecord
from ..parser.events import DamageEvent
from ..providers.base import SnapshotProviders
from ..tracking.window import EventWindow

logger = logging.getLogger(__name__)


class MessageType(Enum):
    """Kinds of inbound messages."""

    DAMAGE_EVENT_RECEIVED = "damage_event_received"
    DEATH_OCCURRED = "death_occurred"
    CONFIG_CHANGED = "config_changed"


@dataclass(frozen=True)
class DamageEventReceived:
    """Damage seen in the combat log."""

    event: DamageEvent
    type: MessageType = field(default=MessageType.DAMAGE_EVENT_RECEIVED, init=False)


@dataclass(frozen=True)
class DeathOccurred:
    """The tracked character died."""

    type: MessageType = field(default=MessageType.DEATH_OCCURRED, init=False)


@dataclass(frozen=True)
class ConfigChanged:
    """A user changed a setting."""

    setting: str
    value: Any
    type: MessageType = field(default=MessageType.CONFIG_CHANGED, init=False)


Message = Union[DamageEventReceived, DeathOccurred, ConfigChanged]


class DeathLogger:
    """
    Owns the damage window, record store and recorder for one character.

    The screenshot settings are only read here; taking the screenshot is up
    to the host's ``screenshot_hook``, called with the configured delay.
    """

    def __init__(
        self,
        window: EventWindow,
        store: DeathRecordStore,
        providers: Optional[SnapshotProviders] = None,
        screenshot_on: bool = DEFAULT_SCREENSHOT_ON,
        screenshot_delay: float = DEFAULT_SCREENSHOT_DELAY,
        screenshot_hook: Optional[Callable[[float], None]] = None,
        wall_clock: Callable[[], float] = time.time,
    ):
        self.window = window
        self.store = store
        self.recorder = DeathRecorder(window, store, providers=providers, wall_clock=wall_clock)
        self.screenshot_on = screenshot_on
        self.screenshot_delay = screenshot_delay
        self.screenshot_hook = screenshot_hook

    @classmethod
    def from_state(
        cls,
        state: PersistedState,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        subject_id: Optional[str] = None,
        clock: Callable[[], float] = time.time,
        wall_clock: Callable[[], float] = time.time,
        providers: Optional[SnapshotProviders] = None,
        screenshot_hook: Optional[Callable[[float], None]] = None,
    ) -> "DeathLogger":
        """Build a logger around previously persisted state."""
        return cls(
            window=EventWindow(window_seconds=window_seconds, clock=clock, subject_id=subject_id),
            store=DeathRecordStore(max_entries=state.max_entries, records=state.records()),
            providers=providers,
            screenshot_on=state.screenshot_on,
            screenshot_delay=state.screenshot_delay,
            screenshot_hook=screenshot_hook,
            wall_clock=wall_clock,
        )

    def to_state(self) -> PersistedState:
        """Current records and settings in their persisted layout."""
        return PersistedState.from_records(
            list(self.store.all()),
            max_entries=self.store.max_entries,
            screenshot_on=self.screenshot_on,
            screenshot_delay=self.screenshot_delay,
        )

    def dispatch(self, message: Message) -> Optional[DeathRecord]:
        """
        Process one inbound message.

        Returns:
            The new record for DeathOccurred, otherwise None

        Raises:
            InvalidSettingError: For a ConfigChanged with an invalid value;
                the setting keeps its previous value
        """
        if message.type is MessageType.DAMAGE_EVENT_RECEIVED:
            self.window.ingest(message.event)
            return None

        if message.type is MessageType.DEATH_OCCURRED:
            record = self.recorder.on_death()
            self._request_screenshot()
            return record

        if message.type is MessageType.CONFIG_CHANGED:
            self.apply_setting(message.setting, message.value)
            return None

        raise ValueError(f"Unknown message type: {message.type!r}")

    def apply_setting(self, setting: str, value: Any):
        """
        Validate and apply a setting change.

        Raises:
            InvalidSettingError: If the setting is unknown or the value is rejected
        """
        if setting == "window_seconds":
            self.window.set_window_seconds(parse_window_seconds(value))
        elif setting == "max_entries":
            self.store.set_capacity(parse_max_entries(value))
        elif setting == "screenshot_on":
            self.screenshot_on = parse_screenshot_on(value)
        elif setting == "screenshot_delay":
            self.screenshot_delay = parse_screenshot_delay(value)
        else:
            raise InvalidSettingError(setting, value, f"Unknown setting '{setting}'.")

        logger.info(f"Setting {setting} changed to {value!r}")

    def _request_screenshot(self):
        if not self.screenshot_on or self.screenshot_hook is None:
            return
        try:
            self.screenshot_hook(self.screenshot_delay)
        except Exception as e:
            logger.error(f"Screenshot hook failed: {e}")
