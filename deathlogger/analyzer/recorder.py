"""
Death recorder: turns a death notification into a stored death record.
"""

import time
import logging
from typing import Callable, List, Optional

from .displays import summarize_death
from ..database.store import DeathRecordStore
from ..models.records import Currency, DeathRecord
from ..providers.base import SnapshotProviders
from ..tracking.resolver import resolve_killer
from ..tracking.window import EventWindow

logger = logging.getLogger(__name__)

RecordListener = Callable[[DeathRecord], None]


class DeathRecorder:
    """
    Records deaths of the tracked character.

    On each death the killer is resolved from the damage window, snapshots
    are pulled from the providers, the record is appended to the store and
    the window is cleared. Missing data never blocks a record: a provider
    that fails or reports nothing leaves its field empty.
    """

    def __init__(
        self,
        window: EventWindow,
        store: DeathRecordStore,
        providers: Optional[SnapshotProviders] = None,
        wall_clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the recorder.

        Args:
            window: Recent damage window for the tracked character
            store: Record store that receives new records
            providers: Snapshot providers (none available by default)
            wall_clock: Function returning the time stamped on records
        """
        self.window = window
        self.store = store
        self.providers = providers or SnapshotProviders()
        self.wall_clock = wall_clock
        self.listeners: List[RecordListener] = []

    def add_listener(self, listener: RecordListener):
        """Register a callback that receives every new record."""
        self.listeners.append(listener)

    def on_death(self) -> DeathRecord:
        """
        Record a death.

        Each call produces an independent record; duplicate notifications
        are not filtered here.

        Returns:
            The record that was appended
        """
        killer = resolve_killer(self.window.snapshot())

        money = self._snapshot("currency")
        record = DeathRecord(
            recorded_at=self.wall_clock(),
            killer=killer,
            identity=self._snapshot("identity"),
            location=self._snapshot("location"),
            currency=self._currency(money),
            inventory=self._snapshot("inventory"),
            instance=self._snapshot("instance"),
        )

        self.store.append(record)
        self.window.clear()

        logger.info(summarize_death(record))

        for listener in self.listeners:
            try:
                listener(record)
            except Exception as e:
                logger.error(f"Death record listener {listener!r} failed: {e}")

        return record

    def _snapshot(self, capability: str):
        """Call one provider capability, treating any failure as unavailable."""
        try:
            return getattr(self.providers, capability)()
        except Exception as e:
            logger.warning(f"{capability} provider failed, recording without it: {e}")
            return None

    @staticmethod
    def _currency(money) -> Optional[Currency]:
        if money is None:
            return None
        try:
            return Currency.from_total(int(money))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric money value {money!r}")
            return None

