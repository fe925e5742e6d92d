"""
Sliding time window of recent damage taken by the tracked character.
"""

import time
import logging
import threading
from collections import deque
from typing import Callable, Deque, Optional, Tuple

from ..config.settings import DEFAULT_WINDOW_SECONDS, parse_window_seconds
from ..parser.events import DamageEvent, DamageKind

logger = logging.getLogger(__name__)


class EventWindow:
    """
    Chronologically ordered buffer of recent damage events.

    Every insert prunes events older than ``window_seconds`` relative to
    the injected clock, so the window only ever holds the last few seconds
    of damage. A small window keeps a stale hit from being blamed for a
    death when several sources overlap.

    When ``subject_id`` is set, events aimed at any other unit are dropped
    on ingest; events whose kind is not a tracked damage kind are always
    dropped.
    """

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
        subject_id: Optional[str] = None,
    ):
        """
        Initialize the window.

        Args:
            window_seconds: How long an event stays relevant
            clock: Function returning "now" in the same unit as event timestamps
            subject_id: GUID of the tracked character, None to accept any target
        """
        self.window_seconds = parse_window_seconds(window_seconds)
        self.clock = clock
        self.subject_id = subject_id

        self._events: Deque[DamageEvent] = deque()
        self._lock = threading.RLock()

    def accepts(self, event: DamageEvent) -> bool:
        """Check the kind and tracked-subject filters."""
        if not isinstance(getattr(event, "kind", None), DamageKind):
            return False
        if self.subject_id is not None and event.target_id != self.subject_id:
            return False
        return True

    def ingest(self, event: DamageEvent):
        """
        Append an event to the tail, then prune.

        Events with missing amount or source are kept as-is; attribution
        has to work with incomplete telemetry.
        """
        if not self.accepts(event):
            logger.debug(f"Dropped event {getattr(event, 'kind', None)} for target {getattr(event, 'target_id', None)}")
            return

        with self._lock:
            self._events.append(event)
            self.prune(self.clock())

    def prune(self, now: Optional[float] = None) -> int:
        """
        Remove every event older than ``now - window_seconds``.

        Args:
            now: Reference time, defaults to the clock

        Returns:
            Number of events removed
        """
        if now is None:
            now = self.clock()
        cutoff = now - self.window_seconds

        with self._lock:
            removed = 0
            # Insertion order is time order, so stale events sit at the head
            while self._events and self._events[0].timestamp < cutoff:
                self._events.popleft()
                removed += 1

            # Log timestamps can step backwards across a clock adjustment
            if self._events and any(e.timestamp < cutoff for e in self._events):
                kept = deque(e for e in self._events if e.timestamp >= cutoff)
                removed += len(self._events) - len(kept)
                self._events = kept

        if removed:
            logger.debug(f"Pruned {removed} events older than {self.window_seconds:.1f}s")
        return removed

    def snapshot(self) -> Tuple[DamageEvent, ...]:
        """Return the current events in order without changing the window."""
        with self._lock:
            return tuple(self._events)

    def clear(self):
        """Empty the window so the next life starts with a clean slate."""
        with self._lock:
            self._events.clear()

    def set_window_seconds(self, window_seconds: float):
        """Change the window length; takes effect on the next prune."""
        self.window_seconds = parse_window_seconds(window_seconds)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    @property
    def is_empty(self) -> bool:
        """Check if the window holds no events."""
        return len(self) == 0
