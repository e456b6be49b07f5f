"""Gregorian calendar <-> Julian Day arithmetic.

Two scales are used:

* the Julian Day Number (JDN), an integer naming a civil day, and
* the day index, a noon-referenced real Julian Day: midnight at the start of
  a day with JDN ``n`` is ``n - 0.5`` and the time of day adds a fraction.

The lunar side of the conversion lives in ``hijri_rrule.dateindex``.
"""

import math
from datetime import date, datetime

from hijri_rrule.errors import OutOfRange

SECONDS_PER_DAY = 86400


def gregorian_to_jdn(year: int, month: int, day: int) -> int:
    """Convert a proleptic Gregorian date to its Julian Day Number."""
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def jdn_to_gregorian(jdn: int) -> date:
    """Fliegel-Van Flandern inverse of gregorian_to_jdn."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    if year < 1:
        raise OutOfRange(
            f"Julian Day Number {jdn} falls before 0001-01-01 and has no "
            f"datetime.date representation"
        )
    return date(year, month, day)


def time_fraction(hour: int = 0, minute: int = 0, second: int = 0) -> float:
    """Fraction of a day elapsed since midnight."""
    return (hour * 3600 + minute * 60 + second) / SECONDS_PER_DAY


def split_day_index(index: float) -> tuple[int, int]:
    """Split a day index into (JDN, seconds since midnight)."""
    jdn = math.floor(index + 0.5)
    seconds = round((index + 0.5 - jdn) * SECONDS_PER_DAY)
    if seconds >= SECONDS_PER_DAY:
        jdn += 1
        seconds -= SECONDS_PER_DAY
    return jdn, seconds


def gregorian_to_day_index(value: date) -> float:
    """Convert a date or datetime to a noon-referenced Julian Day.

    Args:
        value: ``datetime.date`` (taken at midnight) or naive/aware
            ``datetime.datetime`` (wall-clock fields are used as-is)

    Returns:
        Real Julian Day, e.g. 2460735.5 for 2025-03-01 00:00

    Examples:
        >>> gregorian_to_day_index(date(2000, 1, 1))
        2451544.5
    """
    jdn = gregorian_to_jdn(value.year, value.month, value.day)
    fraction = 0.0
    if isinstance(value, datetime):
        fraction = time_fraction(value.hour, value.minute, value.second)
    return jdn - 0.5 + fraction


def day_index_to_gregorian(index: float) -> datetime:
    """Inverse of gregorian_to_day_index, returning a naive datetime."""
    jdn, seconds = split_day_index(index)
    day = jdn_to_gregorian(jdn)
    return datetime(
        day.year,
        day.month,
        day.day,
        seconds // 3600,
        (seconds % 3600) // 60,
        seconds % 60,
    )
