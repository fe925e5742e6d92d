"""
Snapshot providers: identity, location, inventory, money and instance state.
"""

from .base import SnapshotProviders, ChainedProviders
from .static import StaticProviders
from .combat_log import CombatLogContext, parse_character_name

__all__ = [
    "SnapshotProviders",
    "ChainedProviders",
    "StaticProviders",
    "CombatLogContext",
    "parse_character_name",
]
