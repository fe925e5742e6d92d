"""
Event classes and factory for the combat log events the death logger uses.
"""

import logging
from typing import Any, List, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

from .tokenizer import ParsedLine

logger = logging.getLogger(__name__)

# Source GUID the client logs for damage without an originator
NULL_GUID = "0000000000000000"


class DamageKind(Enum):
    """Damage subevents that can kill the tracked character."""

    SWING_DAMAGE = "SWING_DAMAGE"
    RANGE_DAMAGE = "RANGE_DAMAGE"
    SPELL_DAMAGE = "SPELL_DAMAGE"
    SPELL_PERIODIC_DAMAGE = "SPELL_PERIODIC_DAMAGE"
    ENVIRONMENTAL_DAMAGE = "ENVIRONMENTAL_DAMAGE"

    @classmethod
    def from_subevent(cls, subevent: Optional[str]) -> Optional["DamageKind"]:
        """Map a combat log subevent name to a damage kind, None if not tracked."""
        try:
            return cls(subevent)
        except ValueError:
            return None


@dataclass(frozen=True)
class DamageEvent:
    """A hit taken by some unit, as seen in the combat log."""

    timestamp: float
    kind: DamageKind
    source_id: Optional[str] = None
    source_name: Optional[str] = None
    spell_or_cause_name: Optional[str] = None
    amount: Optional[int] = None
    overkill: Optional[int] = None
    target_id: Optional[str] = None
    spell_id: Optional[int] = None
    environmental_type: Optional[str] = None

    @property
    def is_lethal(self) -> bool:
        """True when the hit carried damage past the target's remaining health."""
        return isinstance(self.overkill, (int, float)) and not isinstance(self.overkill, bool) and self.overkill > 0


@dataclass(frozen=True)
class DeathNotice:
    """UNIT_DIED for some unit."""

    timestamp: float
    unit_id: Optional[str] = None
    unit_name: Optional[str] = None


@dataclass(frozen=True)
class ZoneChange:
    """Player entered a zone or instance."""

    timestamp: float
    instance_id: Optional[int] = None
    zone_name: Optional[str] = None
    difficulty_id: Optional[int] = None


@dataclass(frozen=True)
class MapChange:
    """Player's current UI map changed."""

    timestamp: float
    map_id: Optional[int] = None
    map_name: Optional[str] = None


@dataclass(frozen=True)
class CombatantSnapshot:
    """The parts of COMBATANT_INFO the death logger keeps."""

    timestamp: float
    unit_id: Optional[str] = None
    spec_id: Optional[int] = None
    # (slot, item_id) for every non-empty equipment slot, slots numbered from 1
    equipped_item_ids: Tuple[Tuple[int, int], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EncounterChange:
    """ENCOUNTER_START or ENCOUNTER_END."""

    timestamp: float
    started: bool
    encounter_id: Optional[int] = None
    encounter_name: Optional[str] = None
    difficulty_id: Optional[int] = None
    instance_id: Optional[int] = None


ContextEvent = Union[ZoneChange, MapChange, CombatantSnapshot, EncounterChange]
LogEvent = Union[DamageEvent, DeathNotice, ZoneChange, MapChange, CombatantSnapshot, EncounterChange]


class EventFactory:
    """Factory for creating event objects from parsed lines."""

    @staticmethod
    def _safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
        """Safely convert a value to int, returning default on failure."""
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    @staticmethod
    def _guid(value: Any) -> Optional[str]:
        """Normalize a GUID parameter; the null GUID and nil both mean absent."""
        if value is None or value == 0 or value == NULL_GUID:
            return None
        return str(value)

    @staticmethod
    def _text(value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    @classmethod
    def create_event(cls, parsed_line: ParsedLine) -> Optional[LogEvent]:
        """
        Create an event object from a parsed line.

        Args:
            parsed_line: ParsedLine object from tokenizer

        Returns:
            The matching event object, or None for lines the death logger ignores
        """
        event_type = parsed_line.event_type
        timestamp = parsed_line.timestamp.timestamp()

        kind = DamageKind.from_subevent(event_type)
        if kind is not None:
            return cls._create_damage_event(kind, timestamp, parsed_line)

        if event_type == "UNIT_DIED":
            base = parsed_line.base_params
            return DeathNotice(
                timestamp=timestamp,
                unit_id=cls._guid(base[4]) if len(base) > 5 else None,
                unit_name=cls._text(base[5]) if len(base) > 5 else None,
            )

        params = parsed_line.suffix_params
        if event_type == "ZONE_CHANGE":
            return ZoneChange(
                timestamp=timestamp,
                instance_id=cls._safe_int(params[0]) if len(params) > 0 else None,
                zone_name=cls._text(params[1]) if len(params) > 1 else None,
                difficulty_id=cls._safe_int(params[2]) if len(params) > 2 else None,
            )
        if event_type == "MAP_CHANGE":
            return MapChange(
                timestamp=timestamp,
                map_id=cls._safe_int(params[0]) if len(params) > 0 else None,
                map_name=cls._text(params[1]) if len(params) > 1 else None,
            )
        if event_type == "COMBATANT_INFO":
            return cls._create_combatant_snapshot(timestamp, params)
        if event_type in ("ENCOUNTER_START", "ENCOUNTER_END"):
            started = event_type == "ENCOUNTER_START"
            return EncounterChange(
                timestamp=timestamp,
                started=started,
                encounter_id=cls._safe_int(params[0]) if len(params) > 0 else None,
                encounter_name=cls._text(params[1]) if len(params) > 1 else None,
                difficulty_id=cls._safe_int(params[2]) if len(params) > 2 else None,
                instance_id=cls._safe_int(params[4]) if started and len(params) > 4 else None,
            )

        return None

    @classmethod
    def _create_damage_event(cls, kind: DamageKind, timestamp: float, parsed_line: ParsedLine) -> DamageEvent:
        """Build a DamageEvent; missing fields stay None rather than failing."""
        base = parsed_line.base_params
        source_id = cls._guid(base[0]) if len(base) > 0 else None
        source_name = cls._text(base[1]) if len(base) > 1 else None
        target_id = cls._guid(base[4]) if len(base) > 4 else None

        # amount, baseAmount, overkill, school, resisted, blocked, absorbed, critical, ...
        params = parsed_line.suffix_params
        amount = cls._safe_int(params[0]) if len(params) > 0 else None
        overkill = cls._safe_int(params[2]) if len(params) > 2 else None

        spell_id = None
        environmental_type = None
        if kind is DamageKind.SWING_DAMAGE:
            cause = "Melee"
        elif kind is DamageKind.ENVIRONMENTAL_DAMAGE:
            environmental_type = cls._text(parsed_line.prefix_params[0]) if parsed_line.prefix_params else None
            cause = environmental_type
            source_id = None
            source_name = f"Environment: {environmental_type}" if environmental_type else "Environment"
        else:
            prefix = parsed_line.prefix_params
            spell_id = cls._safe_int(prefix[0]) if len(prefix) > 0 else None
            cause = cls._text(prefix[1]) if len(prefix) > 1 else None

        logger.debug(
            f"Created DamageEvent: {kind.value}, source: {source_name}, target: {target_id}, "
            f"amount: {amount}, overkill: {overkill}"
        )

        return DamageEvent(
            timestamp=timestamp,
            kind=kind,
            source_id=source_id,
            source_name=source_name,
            spell_or_cause_name=cause,
            amount=amount,
            overkill=overkill,
            target_id=target_id,
            spell_id=spell_id,
            environmental_type=environmental_type,
        )

    @classmethod
    def _create_combatant_snapshot(cls, timestamp: float, params: List[Any]) -> CombatantSnapshot:
        """
        Pick spec and equipment out of COMBATANT_INFO.

        Layout: playerGUID, faction, 21 stat fields, specID, talents[],
        pvpTalents(), items[(itemID, itemLevel, ...), ...], auras[], ...
        """
        unit_id = cls._guid(params[0]) if len(params) > 0 else None
        spec_id = cls._safe_int(params[23]) if len(params) > 23 else None

        equipped = []
        if len(params) > 26 and isinstance(params[26], list):
            for slot, item in enumerate(params[26], start=1):
                if isinstance(item, tuple) and item:
                    item_id = cls._safe_int(item[0], 0)
                    if item_id:
                        equipped.append((slot, item_id))

        return CombatantSnapshot(
            timestamp=timestamp,
            unit_id=unit_id,
            spec_id=spec_id or None,
            equipped_item_ids=tuple(equipped),
        )
