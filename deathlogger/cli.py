#!/usr/bin/env python3
"""
Command-line interface for the death logger.
"""

import shlex
import click
import logging
import threading
import subprocess
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler

from .analyzer.displays import (
    create_last_death_panel,
    create_records_table,
    export_json,
    export_summary_lines,
    summarize_death,
)
from .config.loader import load_and_apply_config
from .config.settings import InvalidSettingError, Settings
from .database.state import StateFileError, load_state, save_state
from .parser.parser import CombatLogParser, LogFollower
from .providers.base import ChainedProviders
from .providers.combat_log import CombatLogContext
from .providers.static import StaticProviders
from .streaming.dispatcher import ConfigChanged, DeathLogger
from .streaming.session import CombatLogSession, LogClock


# Set up rich console for pretty output
console = Console()

logger = logging.getLogger(__name__)


def _setup_logging(settings: Settings):
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    logging.getLogger().setLevel(level)


def _load_logger(ctx, **kwargs) -> DeathLogger:
    """Load persisted state into a DeathLogger, exiting on an unreadable file."""
    settings = ctx.obj["settings"]
    try:
        state = load_state(settings.state_path)
        return DeathLogger.from_state(state, window_seconds=settings.window_seconds, **kwargs)
    except StateFileError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)


def _save_logger(ctx, death_logger: DeathLogger):
    try:
        save_state(ctx.obj["settings"].state_path, death_logger.to_state())
    except OSError as e:
        console.print(f"[red]Failed to save state: {e}[/red]")
        ctx.exit(1)


def _change_setting(ctx, setting, value) -> Optional[DeathLogger]:
    """Apply and persist one setting; prints the rejection message on bad input."""
    death_logger = _load_logger(ctx)
    try:
        death_logger.dispatch(ConfigChanged(setting, value))
    except InvalidSettingError as e:
        console.print(f"[red]{e}[/red]")
        return None
    _save_logger(ctx, death_logger)
    return death_logger


def _screenshot_command_hook(command: str):
    """Hook that runs an external capture command after the configured delay."""
    args = shlex.split(command)

    def run():
        try:
            subprocess.run(args, check=True)
            logger.info("Screenshot captured.")
        except (OSError, subprocess.CalledProcessError) as e:
            logger.error(f"Screenshot command failed: {e}")

    def hook(delay: float):
        timer = threading.Timer(delay, run)
        timer.daemon = True
        timer.start()

    return hook


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--state", "state_path", type=click.Path(dir_okay=False), help="State file path")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML config file")
@click.pass_context
def cli(ctx, verbose, state_path, config_path):
    """Death Logger - records how, where and by what your character died"""
    try:
        settings = Settings.from_env()
    except InvalidSettingError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(2)

    if state_path:
        settings.state_path = state_path
    if config_path:
        settings.config_path = config_path
    if verbose:
        settings.log_level = "debug"

    _setup_logging(settings)
    blocks = load_and_apply_config(settings.config_path, settings)
    if verbose:
        settings.log_configuration()

    ctx.obj = {"settings": settings, "blocks": blocks}

    if ctx.invoked_subcommand is None:
        ctx.invoke(last)


@cli.command()
@click.pass_context
def last(ctx):
    """Show the most recent death."""
    record = _load_logger(ctx).store.last()
    if record is None:
        console.print("No deaths recorded yet.")
        return
    console.print(create_last_death_panel(record))


@click.command()
@click.pass_context
def count(ctx):
    """Count recorded deaths."""
    death_logger = _load_logger(ctx)
    console.print(f"{death_logger.store.count()} death records.")


cli.add_command(count)
cli.add_command(count, name="list")


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["summary", "json", "table"]), default="summary")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the export to a file")
@click.pass_context
def export(ctx, fmt, output):
    """Export recorded deaths, oldest first."""
    records = _load_logger(ctx).store.all()
    if not records:
        console.print("Nothing to export.")
        return

    if fmt == "table":
        console.print(create_records_table(records))
        return

    if fmt == "json":
        text = export_json(records)
    else:
        text = "\n".join(export_summary_lines(records))

    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]Exported {len(records)} records to {output}[/green]")
    else:
        # Plain output so the lines can be copied or piped
        click.echo(text)
        if fmt == "summary":
            console.print("[dim]Use --format json for full data (bags/equipped).[/dim]")


@click.command()
@click.pass_context
def wipe(ctx):
    """Clear all records."""
    death_logger = _load_logger(ctx)
    death_logger.store.clear()
    _save_logger(ctx, death_logger)
    console.print("Cleared all records.")


cli.add_command(wipe)
cli.add_command(wipe, name="clear")


@cli.group(invoke_without_command=True)
@click.pass_context
def screenshot(ctx):
    """Show or change the auto-screenshot settings."""
    if ctx.invoked_subcommand is None:
        death_logger = _load_logger(ctx)
        status = "ON" if death_logger.screenshot_on else "OFF"
        console.print(f"Auto-screenshot {status}, delay {death_logger.screenshot_delay:.2f}s.")


@screenshot.command("on")
@click.pass_context
def screenshot_on(ctx):
    """Enable the auto screenshot."""
    if _change_setting(ctx, "screenshot_on", True) is not None:
        console.print("Auto-screenshot ON.")


@screenshot.command("off")
@click.pass_context
def screenshot_off(ctx):
    """Disable the auto screenshot."""
    if _change_setting(ctx, "screenshot_on", False) is not None:
        console.print("Auto-screenshot OFF.")


@screenshot.command("delay")
@click.argument("seconds")
@click.pass_context
def screenshot_delay(ctx, seconds):
    """Set the capture delay in seconds."""
    death_logger = _change_setting(ctx, "screenshot_delay", seconds)
    if death_logger is not None:
        console.print(f"Screenshot delay set to {death_logger.screenshot_delay:.2f}s.")


@cli.command()
@click.argument("entries")
@click.pass_context
def capacity(ctx, entries):
    """Set the maximum number of records kept."""
    death_logger = _change_setting(ctx, "max_entries", entries)
    if death_logger is not None:
        console.print(f"Keeping at most {death_logger.store.max_entries} records.")


def _build_session(ctx, player, name, screenshot_hook=None):
    clock = LogClock()
    context = CombatLogContext(subject_id=player, subject_name=name)
    providers = ChainedProviders(context, StaticProviders.from_config(ctx.obj["blocks"]))
    death_logger = _load_logger(
        ctx,
        subject_id=player,
        clock=clock,
        wall_clock=clock,
        providers=providers,
        screenshot_hook=screenshot_hook,
    )
    return CombatLogSession(death_logger, context, clock)


@cli.command()
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--player", required=True, help="GUID of the character to track")
@click.option("--name", default=None, help="Character name (Name-Realm) if not in the log")
@click.pass_context
def replay(ctx, log_file, player, name):
    """Record every death of a character found in a combat log."""
    console.print(f"[bold green]Replaying combat log:[/bold green] {Path(log_file).name}")

    session = _build_session(ctx, player, name)
    parser = CombatLogParser()
    records = session.run(parser.parse_file(log_file))
    _save_logger(ctx, session.death_logger)

    stats = parser.get_stats()
    console.print(
        f"[cyan]Lines:[/cyan] {stats['lines_processed']:,}  "
        f"[cyan]Events:[/cyan] {stats['events_processed']:,}  "
        f"[cyan]Parse errors:[/cyan] {stats['errors']:,}"
    )
    for record in records:
        console.print(summarize_death(record))
    console.print(f"[bold]{len(records)} deaths recorded.[/bold]")


@cli.command()
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--player", required=True, help="GUID of the character to track")
@click.option("--name", default=None, help="Character name (Name-Realm) if not in the log")
@click.option("--follow", is_flag=True, help="Keep waiting for new lines")
@click.option("--from-end", is_flag=True, help="Skip lines already in the file")
@click.option("--screenshot-cmd", default=None, help="Command run to capture a screenshot")
@click.pass_context
def watch(ctx, log_file, player, name, follow, from_end, screenshot_cmd):
    """Record deaths while the game writes the combat log."""
    hook = _screenshot_command_hook(screenshot_cmd) if screenshot_cmd else None
    session = _build_session(ctx, player, name, screenshot_hook=hook)
    follower = LogFollower(log_file)

    console.print(f"[bold green]Watching:[/bold green] {log_file} (Ctrl+C to stop)")
    try:
        for event in follower.follow(from_end=from_end, follow=follow):
            record = session.feed(event)
            if record is not None:
                _save_logger(ctx, session.death_logger)
                console.print(summarize_death(record))
    except KeyboardInterrupt:
        follower.stop()
        console.print("[yellow]Stopped.[/yellow]")

    _save_logger(ctx, session.death_logger)


def main():
    """Entry point for the deathlog command."""
    cli()


if __name__ == "__main__":
    main()
