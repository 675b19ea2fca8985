"""
Time parsing and timezone normalization.

Provider timestamps arrive as ISO-8601 strings with or without offsets. The engine only
needs the local calendar date of the sample (for the solar-angle bonus), but we keep all
datetimes timezone-aware so the date is never read off a naive UTC value by mistake.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo


def ensure_tz(dt: datetime, timezone: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `timezone` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt


def parse_datetime(value: str, timezone: str) -> datetime:
    """Parse ISO-8601 datetime string and ensure tzinfo is present.

    Notes:
    - Accepts a trailing `Z` (UTC) and converts it to `+00:00` for `fromisoformat`.
    - If the parsed value is naive, the provided `timezone` is attached.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    return ensure_tz(dt, timezone)


def local_day_of_year(dt: datetime, timezone: str) -> int:
    """Day of year (1..366) in the sample's own offset; naive values are read in `timezone`."""
    return ensure_tz(dt, timezone).timetuple().tm_yday
