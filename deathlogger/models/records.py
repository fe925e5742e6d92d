"""
Death record models and the snapshots attached to them.

Every snapshot field is optional: None means the provider had nothing to
report, which is kept distinct from a zero or empty value. Records are
frozen once built; the store never edits them.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..tracking.resolver import KillerAttribution

COPPER_PER_SILVER = 100
COPPER_PER_GOLD = 10000


def money_breakdown(total: Optional[int]) -> Tuple[int, int, int]:
    """
    Split a copper amount into (gold, silver, copper).

    Args:
        total: Amount in copper; None counts as zero

    Returns:
        Tuple of gold, silver and copper
    """
    total = int(total or 0)
    gold, remainder = divmod(total, COPPER_PER_GOLD)
    silver, copper = divmod(remainder, COPPER_PER_SILVER)
    return gold, silver, copper


def format_money(total: Optional[int]) -> str:
    """Format a copper amount as "<g>g <s>s <c>c"."""
    gold, silver, copper = money_breakdown(total)
    return f"{gold}g {silver}s {copper}c"


def round_coordinate(value: Optional[float], places: int = 2) -> Optional[float]:
    """Round half-up to the given number of decimals."""
    if value is None:
        return None
    mult = 10 ** places
    return math.floor(value * mult + 0.5) / mult


@dataclass(frozen=True)
class Identity:
    """Who died."""

    name: Optional[str] = None
    realm: Optional[str] = None
    level: Optional[int] = None
    class_name: Optional[str] = None
    spec_id: Optional[int] = None


@dataclass(frozen=True)
class Location:
    """Where the death happened; coordinates are map percentages (0-100)."""

    zone: Optional[str] = None
    subzone: Optional[str] = None
    map_id: Optional[int] = None
    x: Optional[float] = None
    y: Optional[float] = None

    @classmethod
    def from_map_position(
        cls,
        zone: Optional[str],
        subzone: Optional[str],
        map_id: Optional[int],
        fx: Optional[float],
        fy: Optional[float],
    ) -> "Location":
        """Build a location from 0..1 map fractions."""
        return cls(
            zone=zone,
            subzone=subzone,
            map_id=map_id,
            x=round_coordinate(fx * 100) if fx is not None else None,
            y=round_coordinate(fy * 100) if fy is not None else None,
        )

    @property
    def has_coordinates(self) -> bool:
        return self.x is not None and self.y is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mapID": self.map_id,
            "zone": self.zone,
            "subzone": self.subzone,
            "x": self.x,
            "y": self.y,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(
            zone=data.get("zone"),
            subzone=data.get("subzone"),
            map_id=data.get("mapID"),
            x=data.get("x"),
            y=data.get("y"),
        )


@dataclass(frozen=True)
class BagSlot:
    """One occupied bag slot."""

    slot: int
    item_id: Optional[int] = None
    stack_count: Optional[int] = None
    hyperlink: Optional[str] = None
    icon: Optional[int] = None
    quality: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot": self.slot,
            "itemID": self.item_id,
            "stackCount": self.stack_count,
            "hyperlink": self.hyperlink,
            "icon": self.icon,
            "quality": self.quality,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BagSlot":
        return cls(
            slot=data["slot"],
            item_id=data.get("itemID"),
            stack_count=data.get("stackCount"),
            hyperlink=data.get("hyperlink"),
            icon=data.get("icon"),
            quality=data.get("quality"),
        )


@dataclass(frozen=True)
class BagSnapshot:
    """Contents of one bag."""

    bag_id: int
    slots: Tuple[BagSlot, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {"bagID": self.bag_id, "slots": [s.to_dict() for s in self.slots]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BagSnapshot":
        return cls(
            bag_id=data["bagID"],
            slots=tuple(BagSlot.from_dict(s) for s in data.get("slots") or []),
        )


@dataclass(frozen=True)
class EquippedSlot:
    """One equipped item."""

    slot: int
    hyperlink: Optional[str] = None
    item_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"slot": self.slot, "hyperlink": self.hyperlink}
        if self.item_id is not None:
            result["itemID"] = self.item_id
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EquippedSlot":
        return cls(slot=data["slot"], hyperlink=data.get("hyperlink"), item_id=data.get("itemID"))


@dataclass(frozen=True)
class Inventory:
    """Bags and equipment at the moment of death, attached verbatim."""

    bags: Optional[Tuple[BagSnapshot, ...]] = None
    equipped: Optional[Tuple[EquippedSlot, ...]] = None


@dataclass(frozen=True)
class Currency:
    """Money carried, in copper and split into gold/silver/copper."""

    total: int
    gold: int
    silver: int
    copper: int

    @classmethod
    def from_total(cls, total: int) -> "Currency":
        gold, silver, copper = money_breakdown(total)
        return cls(total=int(total), gold=gold, silver=silver, copper=copper)

    def format(self) -> str:
        return format_money(self.total)


@dataclass(frozen=True)
class InstanceContext:
    """Dungeon or raid the character was in."""

    name: Optional[str] = None
    difficulty_id: Optional[int] = None
    difficulty_name: Optional[str] = None
    instance_id: Optional[int] = None


@dataclass(frozen=True)
class DeathRecord:
    """A single recorded death."""

    recorded_at: float
    killer: KillerAttribution
    identity: Optional[Identity] = None
    location: Optional[Location] = None
    currency: Optional[Currency] = None
    inventory: Optional[Inventory] = None
    instance: Optional[InstanceContext] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the persisted entry layout.

        The flat camelCase keys match the addon's SavedVariables entries.
        """
        identity = self.identity or Identity()
        inventory = self.inventory or Inventory()
        instance = self.instance or InstanceContext()
        currency = self.currency

        return {
            "at": self.recorded_at,
            "player": identity.name,
            "realm": identity.realm,
            "level": identity.level,
            "class": identity.class_name,
            "specID": identity.spec_id,
            "location": self.location.to_dict() if self.location else None,
            "killer": self.killer.to_dict(),
            "bags": [b.to_dict() for b in inventory.bags] if inventory.bags is not None else None,
            "equipped": [e.to_dict() for e in inventory.equipped] if inventory.equipped is not None else None,
            "moneyCopper": currency.total if currency else None,
            "moneyGold": currency.gold if currency else None,
            "moneySilver": currency.silver if currency else None,
            "moneyCopperOnly": currency.copper if currency else None,
            "mapDifficultyID": instance.difficulty_id,
            "instanceID": instance.instance_id,
            "instanceName": instance.name,
            "instanceDifficulty": instance.difficulty_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeathRecord":
        """Rebuild a record from its persisted entry."""
        identity = Identity(
            name=data.get("player"),
            realm=data.get("realm"),
            level=data.get("level"),
            class_name=data.get("class"),
            spec_id=data.get("specID"),
        )
        instance = InstanceContext(
            name=data.get("instanceName"),
            difficulty_id=data.get("mapDifficultyID"),
            difficulty_name=data.get("instanceDifficulty"),
            instance_id=data.get("instanceID"),
        )
        bags = data.get("bags")
        equipped = data.get("equipped")
        inventory = Inventory(
            bags=tuple(BagSnapshot.from_dict(b) for b in bags) if bags is not None else None,
            equipped=tuple(EquippedSlot.from_dict(e) for e in equipped) if equipped is not None else None,
        )
        money = data.get("moneyCopper")

        return cls(
            recorded_at=data.get("at") or 0,
            killer=KillerAttribution.from_dict(data.get("killer")),
            identity=identity if identity != Identity() else None,
            location=Location.from_dict(data["location"]) if data.get("location") is not None else None,
            currency=Currency.from_total(money) if money is not None else None,
            inventory=inventory if inventory != Inventory() else None,
            instance=instance if instance != InstanceContext() else None,
        )
