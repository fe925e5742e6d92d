"""
Line tokenizer for parsing WoW combat log lines.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Tuple, Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class ParsedLine:
    """Represents a parsed combat log line."""

    timestamp: datetime
    event_type: str
    base_params: List[Any]
    prefix_params: List[Any]
    suffix_params: List[Any]
    raw_line: str


class LineTokenizer:
    """
    Tokenizes individual lines from WoW combat logs.

    Handles the CSV-like format with special delimiter handling for timestamps.
    """

    # Format: "M/D/YYYY HH:MM:SS.mmm-Z  EVENT_TYPE,params..."
    LINE_PATTERN = re.compile(
        r"^(\d{1,2}/\d{1,2}/\d{4}\s+\d{1,2}:\d{2}:\d{2}\.\d{3})([-+]\d+)?\s\s(.+)$"
    )

    # sourceGUID through destRaidFlags
    BASE_PARAM_COUNT = 8

    # Unit info block inserted by Advanced Combat Logging: infoGUID, ownerGUID,
    # health, stat and power fields, then positionX, positionY, uiMapID, facing, level
    ADVANCED_PARAM_COUNT = 19

    # Events with their own parameter layouts (no source/dest block)
    SPECIAL_EVENTS = {
        "COMBAT_LOG_VERSION",
        "ZONE_CHANGE",
        "MAP_CHANGE",
        "ENCOUNTER_START",
        "ENCOUNTER_END",
        "CHALLENGE_MODE_START",
        "CHALLENGE_MODE_END",
        "COMBATANT_INFO",
    }

    ADVANCED_SUFFIXES = ("_DAMAGE", "_HEAL", "_ENERGIZE", "_DRAIN", "_LEECH")

    def __init__(self):
        self.line_count = 0
        self.error_count = 0

    def parse_line(self, line: str) -> Optional[ParsedLine]:
        """
        Parse a single combat log line into structured components.

        Args:
            line: Raw line from combat log file

        Returns:
            ParsedLine object or None if parsing fails
        """
        self.line_count += 1

        line = line.rstrip()
        if not line:
            return None

        match = self.LINE_PATTERN.match(line)
        if not match:
            self.error_count += 1
            return None

        timestamp_str, offset_str, rest = match.groups()

        try:
            timestamp = datetime.strptime(timestamp_str, "%m/%d/%Y %H:%M:%S.%f")
        except ValueError:
            self.error_count += 1
            return None

        if offset_str:
            timestamp = timestamp.replace(tzinfo=timezone(timedelta(hours=int(offset_str))))

        params = self._split_params(rest)
        if not params or not isinstance(params[0], str):
            self.error_count += 1
            return None

        event_type = params[0]
        remaining_params = params[1:]

        if event_type in self.SPECIAL_EVENTS:
            return ParsedLine(
                timestamp=timestamp,
                event_type=event_type,
                base_params=[],
                prefix_params=[],
                suffix_params=remaining_params,
                raw_line=line,
            )

        if len(remaining_params) >= self.BASE_PARAM_COUNT:
            base_params = remaining_params[: self.BASE_PARAM_COUNT]
            remaining_params = remaining_params[self.BASE_PARAM_COUNT :]
        else:
            # Not enough parameters for a standard event
            base_params = remaining_params
            remaining_params = []

        prefix_params, suffix_params = self._parse_event_params(event_type, remaining_params)

        return ParsedLine(
            timestamp=timestamp,
            event_type=event_type,
            base_params=base_params,
            prefix_params=prefix_params,
            suffix_params=suffix_params,
            raw_line=line,
        )

    def _split_top_level(self, text: str) -> List[str]:
        """Split on commas that are outside quotes, brackets and parentheses."""
        parts = []
        current = []
        in_quotes = False
        depth = 0

        for char in text:
            if char == '"' and (not current or current[-1] != "\\"):
                in_quotes = not in_quotes
            elif not in_quotes:
                if char in "[(":
                    depth += 1
                elif char in "])":
                    depth -= 1
                elif char == "," and depth == 0:
                    parts.append("".join(current).strip())
                    current = []
                    continue
            current.append(char)

        if current:
            parts.append("".join(current).strip())

        return parts

    def _split_params(self, params_str: str) -> List[Any]:
        """
        Split parameter string by commas, handling quoted strings and nested structures.

        Args:
            params_str: Comma-separated parameter string

        Returns:
            List of parameter values
        """
        return [self._convert_element(param) for param in self._split_top_level(params_str)]

    def _convert_element(self, element: str) -> Any:
        """Convert a single raw element, recursing into arrays and tuples."""
        if len(element) >= 2 and element.startswith('"') and element.endswith('"'):
            return element[1:-1]
        if element == "nil":
            return None
        if element.startswith("[") and element.endswith("]"):
            content = element[1:-1].strip()
            return [self._convert_element(e) for e in self._split_top_level(content)] if content else []
        if element.startswith("(") and element.endswith(")"):
            content = element[1:-1].strip()
            return tuple(self._convert_element(e) for e in self._split_top_level(content)) if content else ()
        return self._convert_param(element)

    def _convert_param(self, param: str) -> Any:
        """
        Convert parameter string to appropriate type.

        Args:
            param: Parameter value as string

        Returns:
            Converted value (int, float, bool, or str)
        """
        if param in ["true", "false"]:
            return param == "true"

        try:
            return int(param)
        except ValueError:
            pass

        # Hex flags
        if param.startswith("0x"):
            try:
                return int(param, 16)
            except ValueError:
                pass

        try:
            return float(param)
        except ValueError:
            pass

        return param

    def _parse_event_params(
        self, event_type: str, params: List[Any]
    ) -> Tuple[List[Any], List[Any]]:
        """
        Split remaining parameters into prefix-specific and suffix-specific.

        Args:
            event_type: The event type (e.g., SPELL_DAMAGE)
            params: Remaining parameters after base params

        Returns:
            Tuple of (prefix_params, suffix_params)
        """
        if event_type.startswith("ENVIRONMENTAL_"):
            # environmentalType follows the unit info block
            params = self._skip_advanced_params(event_type, params)
            return params[:1], params[1:]

        prefix_params = []
        if event_type.startswith(("SPELL_", "RANGE_")) and len(params) >= 3:
            # spellId, spellName, spellSchool
            prefix_params = params[:3]
            params = params[3:]

        return prefix_params, self._skip_advanced_params(event_type, params)

    def _skip_advanced_params(self, event_type: str, params: List[Any]) -> List[Any]:
        """
        Drop the Advanced Combat Logging unit info block when present.

        The block is detected by parameter count: a plain damage suffix has
        at most 11 fields, an advanced one has the 19 unit fields in front.
        """
        if not event_type.endswith(self.ADVANCED_SUFFIXES):
            return params

        if len(params) >= self.ADVANCED_PARAM_COUNT + 6:
            return params[self.ADVANCED_PARAM_COUNT :]
        return params

    def get_stats(self) -> Dict[str, Any]:
        """
        Get parsing statistics.

        Returns:
            Dictionary with line_count and error_count
        """
        return {
            "lines_processed": self.line_count,
            "errors": self.error_count,
            "success_rate": (self.line_count - self.error_count) / max(self.line_count, 1),
        }
