"""
Time and timezone helpers.

Every calculation is anchored to instants carried by the flight itself,
never to the current wall clock.
"""

from datetime import datetime, time

import pytz


def parse_time(time_str: str) -> time:
    """Parse "HH:MM" string to time object. Raises ValueError if malformed."""
    parts = time_str.split(":")
    if len(parts) != 2:
        raise ValueError(f"Expected HH:MM, got {time_str!r}")
    return time(int(parts[0]), int(parts[1]))


def time_to_minutes(t: time) -> int:
    """Convert time to minutes since midnight."""
    return t.hour * 60 + t.minute


def is_known_timezone(tz_name: str | None) -> bool:
    return bool(tz_name) and tz_name in pytz.all_timezones_set


def get_timezone_offset_hours(tz_name: str, reference: datetime) -> float:
    """
    Get UTC offset in hours for a timezone at a given instant.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles")
        reference: Instant to check offset at (for DST). Naive values are
            treated as local wall-clock time in tz_name.

    Returns:
        Offset in hours (e.g., -8.0 for PST, -7.0 for PDT)
    """
    tz = pytz.timezone(tz_name)
    if reference.tzinfo is None:
        localized = tz.localize(reference)
    else:
        localized = reference.astimezone(tz)
    return localized.utcoffset().total_seconds() / 3600


def shortest_clock_shift(raw_hours: float) -> float:
    """
    Normalize an offset difference to the shorter way around the globe.

    Result is in (-12, 12]; positive means the destination clock is ahead.
    A 17h raw difference becomes -7h.
    """
    shift = raw_hours % 24
    if shift > 12:
        shift -= 24
    return shift


def calculate_timezone_shift(origin_tz: str, dest_tz: str, reference: datetime) -> float:
    """
    Signed clock shift from origin to destination at the reference instant.

    Positive = destination ahead (body clock must advance),
    negative = destination behind (body clock must delay).
    """
    origin_offset = get_timezone_offset_hours(origin_tz, reference)
    dest_offset = get_timezone_offset_hours(dest_tz, reference)
    return shortest_clock_shift(dest_offset - origin_offset)


def local_hour(instant: datetime, tz_name: str | None = None) -> float:
    """
    Fractional local hour (0-24) of an instant.

    Uses tz_name when known, otherwise the instant's own offset.
    """
    if tz_name and is_known_timezone(tz_name) and instant.tzinfo is not None:
        instant = instant.astimezone(pytz.timezone(tz_name))
    return instant.hour + instant.minute / 60


def is_aware(instant: datetime | None) -> bool:
    return instant is not None and instant.utcoffset() is not None


def span_minutes(start: datetime | None, end: datetime | None) -> float | None:
    """Minutes from start to end, None unless both are timezone-aware instants."""
    if not (is_aware(start) and is_aware(end)):
        return None
    return (end - start).total_seconds() / 60


def in_time_window(minute_of_day: int, start: time, end: time) -> bool:
    """
    Check whether a minute-of-day falls inside [start, end].

    Windows where end < start wrap past midnight.
    """
    lo = time_to_minutes(start)
    hi = time_to_minutes(end)
    if lo <= hi:
        return lo <= minute_of_day <= hi
    return minute_of_day >= lo or minute_of_day <= hi
