"""
Snapshot providers consulted when a death is recorded.
"""

import logging
from dataclasses import fields, is_dataclass, replace
from typing import Any, List, Optional

from ..models.records import Identity, InstanceContext, Inventory, Location

logger = logging.getLogger(__name__)


class SnapshotProviders:
    """
    Point-in-time state about the tracked character.

    Each method returns None when the information is unavailable. The base
    class reports nothing; hosts override the capabilities they have.
    """

    def identity(self) -> Optional[Identity]:
        """Name, realm, level, class and spec."""
        return None

    def location(self) -> Optional[Location]:
        """Zone, subzone, map and percent coordinates."""
        return None

    def inventory(self) -> Optional[Inventory]:
        """Bag contents and equipped items."""
        return None

    def currency(self) -> Optional[int]:
        """Money carried, in copper."""
        return None

    def instance(self) -> Optional[InstanceContext]:
        """Dungeon or raid context, None outside instances."""
        return None


class ChainedProviders(SnapshotProviders):
    """
    Asks each provider in turn and merges their answers.

    Snapshot dataclasses are merged field by field: each field takes the
    first non-None value in provider order. Other values (money) come from
    the first provider that has one. A failing provider is skipped.
    """

    def __init__(self, *providers: SnapshotProviders):
        self.providers = providers

    def _answers(self, capability: str) -> List[Any]:
        answers = []
        for provider in self.providers:
            try:
                value = getattr(provider, capability)()
            except Exception as e:
                logger.warning(f"{type(provider).__name__} failed to report {capability}: {e}")
                continue
            if value is not None:
                answers.append(value)
        return answers

    def _merged(self, capability: str):
        answers = self._answers(capability)
        if not answers:
            return None

        merged = answers[0]
        if not is_dataclass(merged):
            return merged

        for other in answers[1:]:
            if type(other) is not type(merged):
                continue
            missing = {
                f.name: getattr(other, f.name)
                for f in fields(merged)
                if getattr(merged, f.name) is None and getattr(other, f.name) is not None
            }
            if missing:
                merged = replace(merged, **missing)
        return merged

    def identity(self) -> Optional[Identity]:
        return self._merged("identity")

    def location(self) -> Optional[Location]:
        return self._merged("location")

    def inventory(self) -> Optional[Inventory]:
        return self._merged("inventory")

    def currency(self) -> Optional[int]:
        return self._merged("currency")

    def instance(self) -> Optional[InstanceContext]:
        return self._merged("instance")
