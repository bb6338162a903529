"""
Parsing of "HH:MM" time-of-day strings.

Two parsers share the same signature so callers can choose the policy:

- parse_time_of_day: lenient. Missing or non-numeric components become 0
  and out-of-range values are passed through unchanged. This is what the
  venue settings store has always been read with.
- parse_time_of_day_strict: rejects anything that is not a valid 24-hour
  clock time.
"""

import re
from typing import Callable, List

from business_day_calculator.data.schemas import TimeOfDay

TimeParser = Callable[[str], TimeOfDay]

_STRICT_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def _to_int(part: str) -> int:
    """Convert a component to int, falling back to 0."""
    try:
        return int(part.strip())
    except ValueError:
        return 0


def parse_time_of_day(text: str) -> TimeOfDay:
    """
    Parse an "HH:MM" string leniently.

    Args:
        text: Time string, e.g. "06:00" or "22:30".

    Returns:
        TimeOfDay with the parsed hour and minute. "abc" gives 00:00,
        "7" gives 07:00 and "25:99" gives hour 25, minute 99.
    """
    parts: List[str] = (text or "").split(":")
    hour = _to_int(parts[0]) if parts else 0
    minute = _to_int(parts[1]) if len(parts) > 1 else 0
    return TimeOfDay(hour=hour, minute=minute)


def parse_time_of_day_strict(text: str) -> TimeOfDay:
    """
    Parse an "HH:MM" string, rejecting malformed or out-of-range values.

    Args:
        text: Time string in 24-hour "HH:MM" format.

    Returns:
        TimeOfDay with the parsed hour and minute.

    Raises:
        ValueError: If the string is not a valid time of day.
    """
    match = _STRICT_PATTERN.match(text or "")
    if not match:
        raise ValueError(f"Invalid time format: {text!r}. Use HH:MM")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {text!r}")

    return TimeOfDay(hour=hour, minute=minute)
