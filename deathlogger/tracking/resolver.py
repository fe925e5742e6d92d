"""
Killer attribution from the recent damage window.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from ..parser.events import DamageEvent, DamageKind

UNKNOWN = "Unknown"
NO_RECENT_DAMAGE = "No recent damage events"


@dataclass(frozen=True)
class KillerAttribution:
    """Who or what most likely killed the tracked character."""

    source_name: str
    detail: str
    kind: Optional[DamageKind] = None
    spell_name: Optional[str] = None
    amount: Optional[int] = None
    overkill: Optional[int] = None
    timestamp: Optional[float] = None

    @property
    def is_unknown(self) -> bool:
        """True for the fallback produced from an empty window."""
        return self.kind is None

    def to_dict(self) -> Dict[str, Any]:
        """Persisted layout of the killer block."""
        return {
            "sourceName": self.source_name,
            "detail": self.detail,
            "subevent": self.kind.value if self.kind else None,
            "spellName": self.spell_name,
            "amount": self.amount,
            "overkill": self.overkill,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "KillerAttribution":
        data = data or {}
        return cls(
            source_name=data.get("sourceName") or UNKNOWN,
            detail=data.get("detail") or "",
            kind=DamageKind.from_subevent(data.get("subevent")),
            spell_name=data.get("spellName"),
            amount=data.get("amount"),
            overkill=data.get("overkill"),
            timestamp=data.get("timestamp"),
        )


UNKNOWN_KILLER = KillerAttribution(source_name=UNKNOWN, detail=NO_RECENT_DAMAGE)


def render_detail(event: DamageEvent) -> str:
    """
    Human-readable cause for a damage event.

    Environmental damage renders as "Environmental (<cause>)", melee swings
    as "Melee", everything else as the spell or cause name.
    """
    if event.kind is DamageKind.ENVIRONMENTAL_DAMAGE and event.spell_or_cause_name:
        return f"Environmental ({event.spell_or_cause_name})"
    if event.kind is DamageKind.SWING_DAMAGE:
        return "Melee"
    return event.spell_or_cause_name or event.environmental_type or UNKNOWN


def select_fatal_event(events: Sequence[DamageEvent]) -> Optional[DamageEvent]:
    """
    Pick the event most likely to have been the killing blow.

    Scanning from the newest event back, the first hit with positive
    overkill wins. Without one, the newest event is used.
    """
    for event in reversed(events):
        if event.is_lethal:
            return event
    return events[-1] if events else None


def resolve_killer(events: Sequence[DamageEvent]) -> KillerAttribution:
    """
    Attribute a death to the events in a window snapshot.

    Never raises: an empty window yields the "Unknown" fallback.

    Args:
        events: Damage events in chronological order

    Returns:
        A fully populated KillerAttribution
    """
    event = select_fatal_event(events)
    if event is None:
        return UNKNOWN_KILLER

    return KillerAttribution(
        source_name=event.source_name or UNKNOWN,
        detail=render_detail(event),
        kind=event.kind,
        spell_name=event.spell_or_cause_name or event.environmental_type or UNKNOWN,
        amount=event.amount,
        overkill=event.overkill,
        timestamp=event.timestamp,
    )
