"""
Damage tracking: the recent damage window and killer attribution.
"""

from .window import EventWindow
from .resolver import (
    KillerAttribution,
    UNKNOWN_KILLER,
    resolve_killer,
    render_detail,
    select_fatal_event,
)

__all__ = [
    "EventWindow",
    "KillerAttribution",
    "UNKNOWN_KILLER",
    "resolve_killer",
    "render_detail",
    "select_fatal_event",
]
