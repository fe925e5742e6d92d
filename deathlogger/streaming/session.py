"""
Replay session: drives a DeathLogger from parsed combat-log events.

The log's own timestamps act as the clock, so windows and record times
are the same whether a log is replayed afterwards or followed live.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .dispatcher import DamageEventReceived, DeathLogger, DeathOccurred
from ..models.records import DeathRecord
from ..parser.events import DamageEvent, DeathNotice, LogEvent
from ..providers.combat_log import CombatLogContext

logger = logging.getLogger(__name__)


class LogClock:
    """Clock that reads the latest timestamp seen in the log."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def advance(self, timestamp: float):
        # Out-of-order lines never move the clock backwards
        if timestamp > self.now:
            self.now = timestamp

    def __call__(self) -> float:
        return self.now


@dataclass
class SessionMetrics:
    """Counters for one replay."""

    events_seen: int = 0
    damage_events: int = 0
    deaths_recorded: int = 0
    context_events: int = 0


class CombatLogSession:
    """
    Routes log events for one character.

    Damage goes to the logger's window, the character's UNIT_DIED becomes a
    DeathOccurred message and everything else updates the combat-log context.
    """

    def __init__(self, death_logger: DeathLogger, context: CombatLogContext, clock: LogClock):
        self.death_logger = death_logger
        self.context = context
        self.clock = clock
        self.metrics = SessionMetrics()

    @property
    def subject_id(self) -> Optional[str]:
        return self.context.subject_id

    def feed(self, event: LogEvent) -> Optional[DeathRecord]:
        """
        Process one parsed event.

        Returns:
            The record created when the event was the character's death
        """
        self.metrics.events_seen += 1
        self.clock.advance(event.timestamp)

        if isinstance(event, DamageEvent):
            self.metrics.damage_events += 1
            self.death_logger.dispatch(DamageEventReceived(event))
            return None

        if isinstance(event, DeathNotice):
            if event.unit_id != self.subject_id:
                return None
            # The name may only be known from the death line itself
            self.context.observe(event)
            record = self.death_logger.dispatch(DeathOccurred())
            self.metrics.deaths_recorded += 1
            return record

        self.metrics.context_events += 1
        self.context.observe(event)
        return None

    def run(self, events: Iterable[LogEvent]) -> List[DeathRecord]:
        """Feed every event and return the records created, in order."""
        records = []
        for event in events:
            record = self.feed(event)
            if record is not None:
                records.append(record)

        logger.info(
            f"Replay finished: {self.metrics.events_seen} events, "
            f"{self.metrics.deaths_recorded} deaths recorded"
        )
        return records
