"""
Bounded history of death records.
"""

import logging
import threading
from typing import Iterable, List, Optional, Tuple

from ..config.settings import DEFAULT_MAX_ENTRIES, parse_max_entries
from ..models.records import DeathRecord

logger = logging.getLogger(__name__)


class DeathRecordStore:
    """
    Fixed-capacity record log with oldest-first eviction.

    Capacity is enforced on append only: lowering it with set_capacity
    leaves the current records alone until the next append trims them.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, records: Optional[Iterable[DeathRecord]] = None):
        """
        Initialize the store.

        Args:
            max_entries: Maximum number of records kept after an append
            records: Previously persisted records, oldest first
        """
        self.max_entries = parse_max_entries(max_entries)
        self._records: List[DeathRecord] = list(records or [])
        self._lock = threading.RLock()

    def append(self, record: DeathRecord):
        """Add a record at the tail, evicting from the head while over capacity."""
        with self._lock:
            self._records.append(record)

            evicted = 0
            while len(self._records) > self.max_entries:
                self._records.pop(0)
                evicted += 1

            if evicted:
                logger.debug(f"Evicted {evicted} oldest death records (capacity {self.max_entries})")

    def clear(self):
        """Remove every record."""
        with self._lock:
            count = len(self._records)
            self._records.clear()
        logger.info(f"Cleared {count} death records")

    def count(self) -> int:
        """Number of stored records."""
        with self._lock:
            return len(self._records)

    def last(self) -> Optional[DeathRecord]:
        """Most recently appended record, or None if the store is empty."""
        with self._lock:
            return self._records[-1] if self._records else None

    def all(self) -> Tuple[DeathRecord, ...]:
        """All records, oldest first."""
        with self._lock:
            return tuple(self._records)

    def set_capacity(self, max_entries: int):
        """
        Change the capacity used by future appends.

        Raises:
            InvalidSettingError: If the value is not a whole number of at least 1
        """
        max_entries = parse_max_entries(max_entries)
        with self._lock:
            self.max_entries = max_entries
        logger.info(f"Death record capacity set to {max_entries}")

    def __len__(self) -> int:
        return self.count()

    def __iter__(self):
        return iter(self.all())
