"""
Providers that rebuild the character's situation from the combat log itself.
"""

import logging
from typing import Dict, Optional

from .base import SnapshotProviders
from ..config.wow_data import get_difficulty_name, get_spec_class
from ..models.records import EquippedSlot, Identity, InstanceContext, Inventory, Location
from ..parser.events import (
    CombatantSnapshot,
    DeathNotice,
    EncounterChange,
    LogEvent,
    MapChange,
    ZoneChange,
)

logger = logging.getLogger(__name__)


def parse_character_name(full_name: Optional[str]) -> Dict[str, Optional[str]]:
    """
    Parse character name into components.

    Examples:
        >>> parse_character_name("Felica")
        {'name': 'Felica', 'server': None, 'region': None}

        >>> parse_character_name("Felica-Duskwood-US")
        {'name': 'Felica', 'server': 'Duskwood', 'region': 'US'}
    """
    if not full_name:
        return {"name": None, "server": None, "region": None}

    parts = full_name.strip('"').split("-")
    return {
        "name": parts[0],
        "server": parts[1] if len(parts) > 1 else None,
        "region": parts[2] if len(parts) > 2 else None,
    }


class CombatLogContext(SnapshotProviders):
    """
    Tracks zone, map, spec and gear for one character while a log is read.

    Feed it every context event with observe(); what it has seen so far is
    returned by the provider methods. Money and bag contents never appear in
    combat logs and are always reported as unavailable.
    """

    def __init__(self, subject_id: Optional[str], subject_name: Optional[str] = None):
        self.subject_id = subject_id

        parsed = parse_character_name(subject_name)
        self.name = parsed["name"]
        self.realm = parsed["server"]

        self.zone_name: Optional[str] = None
        self.map_id: Optional[int] = None
        self.map_name: Optional[str] = None
        self.instance_id: Optional[int] = None
        self.difficulty_id: Optional[int] = None
        self.spec_id: Optional[int] = None
        self.equipped: Optional[tuple] = None

    def observe(self, event: LogEvent):
        """Update the tracked context from an event; other events are ignored."""
        if isinstance(event, ZoneChange):
            self.zone_name = event.zone_name
            self.instance_id = event.instance_id
            self.difficulty_id = event.difficulty_id or None
            # A new zone invalidates the old map
            self.map_id = None
            self.map_name = None
        elif isinstance(event, MapChange):
            self.map_id = event.map_id
            self.map_name = event.map_name
        elif isinstance(event, EncounterChange):
            if event.started:
                self.difficulty_id = event.difficulty_id or self.difficulty_id
                self.instance_id = event.instance_id or self.instance_id
        elif isinstance(event, CombatantSnapshot):
            if event.unit_id == self.subject_id:
                self.spec_id = event.spec_id
                self.equipped = tuple(
                    EquippedSlot(slot=slot, item_id=item_id)
                    for slot, item_id in event.equipped_item_ids
                )
                logger.debug(f"Combatant info for {self.subject_id}: spec {self.spec_id}, {len(self.equipped)} items")
        elif isinstance(event, DeathNotice):
            if event.unit_id == self.subject_id and event.unit_name and not self.name:
                parsed = parse_character_name(event.unit_name)
                self.name = parsed["name"]
                self.realm = parsed["server"]

    def identity(self) -> Optional[Identity]:
        if self.name is None and self.spec_id is None:
            return None
        return Identity(
            name=self.name,
            realm=self.realm,
            class_name=get_spec_class(self.spec_id),
            spec_id=self.spec_id,
        )

    def location(self) -> Optional[Location]:
        if self.zone_name is None and self.map_id is None:
            return None
        subzone = self.map_name if self.map_name and self.map_name != self.zone_name else None
        return Location(zone=self.zone_name or self.map_name, subzone=subzone, map_id=self.map_id)

    def inventory(self) -> Optional[Inventory]:
        if self.equipped is None:
            return None
        return Inventory(bags=None, equipped=self.equipped)

    def instance(self) -> Optional[InstanceContext]:
        if not self.difficulty_id:
            return None
        return InstanceContext(
            name=self.zone_name,
            difficulty_id=self.difficulty_id,
            difficulty_name=get_difficulty_name(self.difficulty_id),
            instance_id=self.instance_id,
        )
