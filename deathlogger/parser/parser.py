"""
Combat log parser that coordinates tokenization and event creation.
"""

import time
import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Dict, Any, Optional

from .tokenizer import LineTokenizer
from .events import EventFactory, LogEvent


logger = logging.getLogger(__name__)


class CombatLogParser:
    """
    Parser for WoW combat log files.

    Handles file reading, line tokenization, and event creation. Only the
    events the death logger cares about are yielded.
    """

    def __init__(self):
        self.tokenizer = LineTokenizer()
        self.event_factory = EventFactory()
        self.events_processed = 0
        self.parse_errors: List[Dict[str, Any]] = []

    def parse_file(self, file_path: str) -> Iterator[LogEvent]:
        """
        Parse a combat log file and yield events.

        Args:
            file_path: Path to the combat log file

        Yields:
            Damage, death and context events
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Combat log file not found: {file_path}")

        logger.info(f"Starting parse of {file_path.name} ({file_path.stat().st_size / 1024 / 1024:.1f} MB)")

        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            yield from self.parse_lines(f)

        logger.info(f"Completed parsing {file_path.name}: "
                    f"{self.events_processed} events, {len(self.parse_errors)} errors")

    def parse_lines(self, lines: Iterable[str]) -> Iterator[LogEvent]:
        """Parse an iterable of raw lines."""
        for line in lines:
            event = self.parse_line(line)
            if event is not None:
                yield event

    def parse_line(self, line: str) -> Optional[LogEvent]:
        """
        Process a single line and return its event if it is one we track.

        Args:
            line: Raw line from combat log

        Returns:
            The event, or None for blank, malformed or ignored lines
        """
        if not line.strip():
            return None

        parsed_line = self.tokenizer.parse_line(line)
        if not parsed_line:
            return None

        try:
            event = self.event_factory.create_event(parsed_line)
        except (IndexError, TypeError, ValueError) as e:
            if len(self.parse_errors) < 100:
                self.parse_errors.append({"line": line.rstrip()[:200], "error": str(e)})
            logger.debug(f"Failed to build event: {e}")
            return None

        if event is not None:
            self.events_processed += 1
        return event

    def get_stats(self) -> Dict[str, Any]:
        """Get parsing statistics."""
        stats = self.tokenizer.get_stats()
        stats["events_processed"] = self.events_processed
        stats["parse_errors"] = len(self.parse_errors)
        return stats


class LogFollower:
    """
    Reads a combat log file as it grows (tail -f mode).

    The client appends to the log while the game runs; lines are handed to
    the parser as soon as they are complete.
    """

    def __init__(
        self,
        file_path: str,
        parser: Optional[CombatLogParser] = None,
        poll_interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the follower.

        Args:
            file_path: Path to combat log file
            parser: Parser to use (a new one by default)
            poll_interval: Seconds to wait before checking for new data
            sleep: Sleep function, replaceable in tests
        """
        self.file_path = Path(file_path)
        self.parser = parser or CombatLogParser()
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.file_position = 0
        self._running = False

    def follow(self, from_end: bool = False, follow: bool = True) -> Iterator[LogEvent]:
        """
        Yield events from the file, waiting for new lines when follow is set.

        Args:
            from_end: Start at the current end of the file instead of the beginning
            follow: Keep waiting for new data after reaching end of file
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Combat log file not found: {self.file_path}")

        if from_end:
            self.file_position = self.file_path.stat().st_size

        self._running = True
        logger.info(f"Following {self.file_path} (follow={follow})")

        with open(self.file_path, "r", encoding="utf-8", errors="ignore") as f:
            f.seek(self.file_position)
            pending = ""

            while self._running:
                chunk = f.readline()
                if chunk:
                    pending += chunk
                    if pending.endswith("\n"):
                        event = self.parser.parse_line(pending)
                        pending = ""
                        if event is not None:
                            yield event
                    self.file_position = f.tell()
                    continue

                if not follow:
                    if pending:
                        event = self.parser.parse_line(pending)
                        if event is not None:
                            yield event
                    break

                # The client truncates the log when logging restarts
                if self.file_path.stat().st_size < self.file_position:
                    logger.info("Combat log truncated, starting from the beginning")
                    f.seek(0)
                    self.file_position = 0
                    pending = ""
                    continue

                self.sleep(self.poll_interval)

        self._running = False

    def stop(self):
        """Stop following after the current poll."""
        self._running = False
