"""
Message dispatch and combat-log replay sessions.
"""

from .dispatcher import (
    ConfigChanged,
    DamageEventReceived,
    DeathLogger,
    DeathOccurred,
    Message,
    MessageType,
)
from .session import CombatLogSession, LogClock, SessionMetrics

__all__ = [
    "ConfigChanged",
    "DamageEventReceived",
    "DeathLogger",
    "DeathOccurred",
    "Message",
    "MessageType",
    "CombatLogSession",
    "LogClock",
    "SessionMetrics",
]
