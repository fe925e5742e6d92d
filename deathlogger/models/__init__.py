"""
Data models for recorded deaths.
"""

from .records import (
    DeathRecord,
    Identity,
    Location,
    BagSlot,
    BagSnapshot,
    EquippedSlot,
    Inventory,
    Currency,
    InstanceContext,
    money_breakdown,
    format_money,
    round_coordinate,
)

__all__ = [
    "DeathRecord",
    "Identity",
    "Location",
    "BagSlot",
    "BagSnapshot",
    "EquippedSlot",
    "Inventory",
    "Currency",
    "InstanceContext",
    "money_breakdown",
    "format_money",
    "round_coordinate",
]
