"""Shared validation utilities"""

import re
from datetime import datetime, time, timezone

from ..models import WEEKDAYS

_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def utcnow() -> datetime:
    """Naive UTC timestamp, the convention for DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_wall_time(value: str) -> time:
    """Parse an "HH:MM" wall-clock string"""
    if not isinstance(value, str):
        raise ValueError("Time must be a string in HH:MM format")

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time '{value}'. Expected HH:MM")

    return time(int(match.group(1)), int(match.group(2)))


def normalize_weekdays(days: list[str]) -> list[str]:
    """
    Normalize weekday names to title case, drop duplicates, keep order.

    Raises:
        ValueError: If a name is not a weekday
    """
    normalized = []
    for day in days:
        name = (day or "").strip().capitalize()
        if name not in WEEKDAYS:
            raise ValueError(f"Invalid weekday '{day}'")
        if name not in normalized:
            normalized.append(name)
    return normalized


def validate_time_slot(start: str, end: str) -> tuple[str, str]:
    """Check a declared slot and return it as zero-padded HH:MM strings"""
    start_t = parse_wall_time(start)
    end_t = parse_wall_time(end)
    if start_t >= end_t:
        raise ValueError(f"Time slot {start}-{end} must end after it starts")
    return start_t.strftime("%H:%M"), end_t.strftime("%H:%M")
