"""
Death recording and display.
"""

from .recorder import DeathRecorder
from .displays import (
    summarize_death,
    format_identity,
    last_death_lines,
    export_summary_lines,
    export_json,
)

__all__ = [
    "DeathRecorder",
    "summarize_death",
    "format_identity",
    "last_death_lines",
    "export_summary_lines",
    "export_json",
]
