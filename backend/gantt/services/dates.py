"""
Calendar arithmetic on date-only values.

Inputs are `date` objects or ISO `YYYY-MM-DD` strings. Everything works in
whole calendar days, so there is no time-of-day or daylight-saving drift to
correct for.
"""

import math
from datetime import date, datetime, timedelta

DateLike = date | str


def parse_date(value: DateLike | None) -> date | None:
    """Coerce a date or ISO string to a `date`; blanks become None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def days_between(a: DateLike, b: DateLike) -> int:
    """Whole days from `a` to `b`; positive when `b` is later."""
    return (parse_date(b) - parse_date(a)).days


def add_days(value: DateLike, n: int) -> str:
    """ISO date `n` days after `value` (negative `n` goes back)."""
    return (parse_date(value) + timedelta(days=n)).isoformat()


def round_half_up(value: float) -> int:
    """Round .5 towards +infinity, the way chart coordinates are rounded."""
    return math.floor(value + 0.5)


def date_to_offset(origin: DateLike, value: DateLike, pixels_per_day: float) -> int:
    """Project a date onto the timeline axis relative to `origin`."""
    return round_half_up(days_between(origin, value) * pixels_per_day)


def clamp(value, low, high):
    return max(low, min(high, value))
