"""Conversions between user-facing duration input and stored minutes.

Time is always stored as a positive integer number of minutes. Users may
type it as minutes, as decimal hours, or as a start/end clock range; these
helpers collapse all three to minutes before anything is written.
"""

import math
import re
from datetime import datetime, time
from enum import Enum


class DurationError(ValueError):
    """Raised when duration input cannot become a positive number of minutes."""


class DurationMode(str, Enum):
    """How a duration was typed."""

    MINUTES = "minutes"
    HOURS = "hours"
    RANGE = "range"


def format_duration(minutes: int) -> str:
    """Render minutes compactly: ``45min``, ``1h30``, ``2h``."""
    if minutes < 60:
        return f"{minutes}min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h{mins}" if mins > 0 else f"{hours}h"


def hours_to_minutes(hours: float) -> int:
    """Convert decimal hours to minutes, rounding half up."""
    return math.floor(hours * 60 + 0.5)


def normalize_clock(text: str) -> str:
    """Complete partial ``HH:MM`` input.

    Non-digits are dropped, hours are clamped to 23 and minutes to 59.
    ``"8"`` becomes ``"08:00"`` and ``"8:3"`` becomes ``"08:30"``.
    Returns an empty string for empty input.
    """
    text = text.strip()
    if ":" in text:
        hours_part, _, minutes_part = text.partition(":")
        hours_digits = re.sub(r"\D", "", hours_part)[:2]
        minutes_digits = re.sub(r"\D", "", minutes_part)[:2]
    else:
        digits = re.sub(r"\D", "", text)
        hours_digits, minutes_digits = digits[:2], digits[2:4]

    if not hours_digits:
        return ""

    hours = min(int(hours_digits), 23)
    minutes = min(int(minutes_digits.ljust(2, "0")), 59) if minutes_digits else 0
    return f"{hours:02d}:{minutes:02d}"


def parse_clock(text: str) -> time:
    """Parse a clock time, accepting the partial forms ``normalize_clock`` does."""
    normalized = normalize_clock(text)
    if not normalized:
        raise DurationError(f"Invalid time: {text!r}")
    return datetime.strptime(normalized, "%H:%M").time()


def time_range_to_minutes(start: time, end: time) -> int:
    """Minutes between two clock times on the same day; must be positive."""
    minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    if minutes <= 0:
        raise DurationError("End time must be after start time")
    return minutes


def parse_duration(text: str, mode: DurationMode | str = DurationMode.MINUTES) -> int:
    """Turn typed duration input into a positive number of minutes.

    Args:
        text: What the user typed, e.g. ``"90"``, ``"1.5"`` or ``"09:00-10:30"``.
        mode: How to read ``text``.

    Raises:
        DurationError: If the input is malformed or not strictly positive.
    """
    mode = DurationMode(mode)
    text = text.strip()

    if mode is DurationMode.RANGE:
        start_text, sep, end_text = text.partition("-")
        if not sep:
            raise DurationError(f"Expected HH:MM-HH:MM, got {text!r}")
        return time_range_to_minutes(parse_clock(start_text), parse_clock(end_text))

    try:
        if mode is DurationMode.HOURS:
            minutes = hours_to_minutes(float(text.replace(",", ".")))
        else:
            minutes = int(text)
    except (ValueError, OverflowError):
        raise DurationError(f"Invalid {mode.value}: {text!r}") from None

    if minutes <= 0:
        raise DurationError("Duration must be positive")
    return minutes
