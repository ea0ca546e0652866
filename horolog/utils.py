"""
Utility functions for horolog.

This module contains the timestamp codec used for log filenames,
the parser for window arguments and duration formatting.
"""

import re
from datetime import datetime, timedelta
from typing import Optional

from .constants import (
    DURATION_UNITS,
    SECONDS_PER_DAY,
    TIME_DELIMITER,
    TIME_LAYOUT,
    TIME_PATTERN,
)

_DURATION_PART = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION_RE = re.compile(rf"(?:{_DURATION_PART})+")
_DURATION_PART_RE = re.compile(_DURATION_PART)
_TIME_RE = re.compile(TIME_PATTERN)


def local_now() -> datetime:
    """Return the current wall-clock time as a timezone-aware datetime."""
    return datetime.now().astimezone()


def format_timestamp(dt: datetime) -> str:
    """
    Format a datetime in the log filename layout.

    Naive datetimes are interpreted as local time.

    Args:
        dt: The datetime to format.

    Returns:
        String such as "2024-01-01 09:00:00+01:00".
    """
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.isoformat(sep=" ", timespec="seconds")


def parse_timestamp(timestamp_str: str) -> Optional[datetime]:
    """
    Parse one timestamp of a log filename.

    Args:
        timestamp_str: String in the "YYYY-MM-DD HH:MM:SS+HH:MM" layout.

    Returns:
        Timezone-aware datetime, or None if the string does not match
        the layout exactly.
    """
    if not _TIME_RE.fullmatch(timestamp_str):
        return None
    try:
        return datetime.strptime(timestamp_str, TIME_LAYOUT)
    except ValueError:
        return None


def encode_interval(start: datetime, end: datetime) -> str:
    """Build the log filename stem for an interval."""
    return format_timestamp(start) + TIME_DELIMITER + format_timestamp(end)


def decode_interval(name: str) -> Optional[tuple[datetime, datetime]]:
    """
    Decode a log filename stem into its start and end timestamps.

    Whitespace around the delimiter is optional, so stems written
    as "start=>end" decode as well.

    Args:
        name: Filename without the log suffix.

    Returns:
        (start, end) tuple, or None if the name has fewer than two
        parts or either part is not a valid timestamp.
    """
    parts = name.split(TIME_DELIMITER.strip(), 1)
    if len(parts) < 2:
        return None

    start = parse_timestamp(parts[0].rstrip())
    end = parse_timestamp(parts[1].lstrip())
    if start is None or end is None:
        return None
    return start, end


def parse_window(value: str) -> timedelta:
    """
    Parse the value of a window argument into a timedelta.

    Accepts:
        - Whole days: 5d, 20d
        - Compound durations: 1h30m, 90s, 2h, 1.5h, -30m
        - Zero: 0

    Args:
        value: The text after "=" in e.g. "--show=5d".

    Returns:
        The parsed window.

    Raises:
        ValueError: If the value is empty or not a valid duration.
    """
    if not value:
        raise ValueError("No duration specified")

    if value.endswith("d"):
        try:
            days = int(value[:-1])
        except ValueError:
            raise ValueError(f"Invalid number of days: {value}") from None
        return _to_timedelta(days * SECONDS_PER_DAY, value)

    sign = 1
    body = value
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return timedelta(0)

    if not _DURATION_RE.fullmatch(body):
        raise ValueError(
            f"Invalid duration: {value}. "
            f"Expected days (5d) or a duration such as 1h30m, 45m or 90s."
        )

    seconds = sum(
        float(number) * DURATION_UNITS[unit]
        for number, unit in _DURATION_PART_RE.findall(body)
    )
    return _to_timedelta(sign * seconds, value)


def _to_timedelta(seconds, value: str) -> timedelta:
    try:
        return timedelta(seconds=seconds)
    except OverflowError:
        raise ValueError(f"Duration out of range: {value}") from None


def format_duration(delta: timedelta) -> str:
    """
    Format a duration as hours, minutes and seconds.

    Durations under a second use the largest of ms or µs that fits.

    Args:
        delta: The duration to format. May be negative.

    Returns:
        String such as "1h30m0s", "30m0s", "45s", "500ms" or "0s".
    """
    if not delta:
        return "0s"

    sign = "-" if delta < timedelta(0) else ""
    micros = abs(delta) // timedelta(microseconds=1)

    if micros < 1000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim(micros / 1000)}ms"

    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    secs_str = _trim(rest / 1_000_000) + "s"

    if hours:
        return f"{sign}{hours}h{minutes}m{secs_str}"
    if minutes:
        return f"{sign}{minutes}m{secs_str}"
    return f"{sign}{secs_str}"


def _trim(number: float) -> str:
    return f"{number:.6f}".rstrip("0").rstrip(".")
