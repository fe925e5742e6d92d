"""
Display builders for recorded deaths.
"""

import json
from datetime import datetime
from typing import List, Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config.wow_data import get_spec_name
from ..models.records import DeathRecord, Identity, Location, format_money


def pretty_time(timestamp: Optional[float]) -> str:
    """Local time as "YYYY-MM-DD HH:MM:SS"."""
    if not timestamp:
        return "unknown"
    try:
        return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return str(timestamp)


def format_location(location: Optional[Location]) -> str:
    """Zone, optional subzone and optional coordinates on one line."""
    location = location or Location()
    text = location.zone or "Unknown"
    if location.subzone:
        text += f" - {location.subzone}"
    if location.has_coordinates:
        text += f" ({location.x:.2f}, {location.y:.2f})"
    return text


def format_identity(identity: Optional[Identity]) -> Optional[str]:
    """Character name with realm, level, spec and class; None when nothing is known."""
    if identity is None:
        return None
    name = identity.name or "Unknown"
    if identity.realm:
        name += f"-{identity.realm}"

    details = []
    if identity.level:
        details.append(f"level {identity.level}")
    if identity.spec_id:
        details.append(get_spec_name(identity.spec_id))
    if identity.class_name:
        details.append(identity.class_name)
    return f"{name} ({' '.join(details)})" if details else name


def format_record_money(record: DeathRecord, missing: str = "unknown") -> str:
    """Money carried at death, or ``missing`` when it was not captured."""
    if record.currency is None:
        return missing
    return format_money(record.currency.total)


def summarize_death(record: DeathRecord) -> str:
    """One-line description of a newly recorded death."""
    killer = record.killer
    return (
        f"Recorded death in {format_location(record.location)}. "
        f"Killer: {killer.source_name or 'Unknown'} ({killer.detail or ''}). "
        f"Money: {format_record_money(record, missing=format_money(0))}"
    )


def last_death_lines(record: DeathRecord) -> List[str]:
    """Detail lines for the most recent death."""
    killer = record.killer
    inventory = record.inventory
    bags = len(inventory.bags) if inventory and inventory.bags else 0
    equipped = len(inventory.equipped) if inventory and inventory.equipped else 0

    lines = [f"When: {pretty_time(record.recorded_at)}"]
    who = format_identity(record.identity)
    if who:
        lines.append(f"Who: {who}")
    lines += [
        f"Where: {format_location(record.location)}",
        f"Killer: {killer.source_name or 'Unknown'} ({killer.detail or ''})",
    ]
    if record.currency is not None:
        lines.append(f"Money: {format_money(record.currency.total)}")
    lines.append(f"Items: bags={bags}, equipped={equipped}")
    return lines


def create_last_death_panel(record: DeathRecord) -> Panel:
    """Panel showing the most recent death."""
    text = Text()
    for line in last_death_lines(record):
        label, _, value = line.partition(": ")
        text.append(f"{label}: ", style="bold cyan")
        text.append(f"{value}\n", style="white")
    text.rstrip()
    return Panel(text, title="Last death", border_style="red")


def export_summary_lines(records: Sequence[DeathRecord]) -> List[str]:
    """One brace-delimited summary line per record, oldest first."""
    lines = []
    for i, record in enumerate(records, 1):
        location = record.location or Location()
        killer = record.killer
        x = location.x if location.x is not None else -1
        y = location.y if location.y is not None else -1
        lines.append(
            f'[{i}] {{time:"{pretty_time(record.recorded_at)}", '
            f'zone:"{location.zone or ""}", subzone:"{location.subzone or ""}", '
            f'x:{x:.2f}, y:{y:.2f}, '
            f'killer:"{killer.source_name or ""}", detail:"{killer.detail or ""}", '
            f'money:"{format_record_money(record)}"}}'
        )
    return lines


def export_json(records: Sequence[DeathRecord]) -> str:
    """Full records, including bags and equipment, as JSON."""
    return json.dumps([record.to_dict() for record in records], indent=2)


def create_records_table(records: Sequence[DeathRecord]) -> Table:
    """Table of all records, oldest first."""
    table = Table(title=f"Death records ({len(records)})", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("When", width=19)
    table.add_column("Where")
    table.add_column("Killer", style="red")
    table.add_column("Cause")
    table.add_column("Money", justify="right")

    for i, record in enumerate(records, 1):
        table.add_row(
            str(i),
            pretty_time(record.recorded_at),
            format_location(record.location),
            record.killer.source_name or "Unknown",
            record.killer.detail or "",
            format_record_money(record),
        )

    return table
