"""
Combat log parser module for turning WoW combat log lines into events.
"""

from .tokenizer import LineTokenizer, ParsedLine
from .events import (
    DamageKind,
    DamageEvent,
    DeathNotice,
    ZoneChange,
    MapChange,
    CombatantSnapshot,
    EncounterChange,
    EventFactory,
)
from .parser import CombatLogParser, LogFollower

__all__ = [
    "LineTokenizer",
    "ParsedLine",
    "DamageKind",
    "DamageEvent",
    "DeathNotice",
    "ZoneChange",
    "MapChange",
    "CombatantSnapshot",
    "EncounterChange",
    "EventFactory",
    "CombatLogParser",
    "LogFollower",
]
