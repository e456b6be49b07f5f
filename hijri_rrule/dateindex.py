"""Lunar dates on the continuous day-index scale.

The day index is the noon-referenced Julian Day used by
``hijri_rrule.julian``; putting both calendars on it makes day arithmetic a
matter of adding numbers.
"""

import math
from datetime import date

from hijri_rrule.calendars import CalendarBackend
from hijri_rrule.config import CalendarVariant
from hijri_rrule.date import LunarDate
from hijri_rrule.julian import split_day_index, time_fraction


def lunar_to_day_index(value: LunarDate, backend: CalendarBackend | None = None) -> float:
    """Noon-referenced Julian Day of a lunar date, including its time of day.

    Examples:
        >>> lunar_to_day_index(LunarDate(1, 1, 1, calendar="islamic-tbla"))
        1948439.5
    """
    backend = backend or value.backend
    jdn = backend.lunar_to_day_number(value.year, value.month, value.day)
    return jdn - 0.5 + time_fraction(value.hour, value.minute, value.second)


def day_index_to_lunar(
    index: float,
    backend: CalendarBackend,
    calendar: CalendarVariant | None = None,
) -> LunarDate:
    """Inverse of lunar_to_day_index.

    Args:
        index: Noon-referenced Julian Day
        backend: Backend performing the conversion
        calendar: Tag for the resulting date; defaults to the backend's variant
    """
    jdn, seconds = split_day_index(index)
    year, month, day = backend.day_number_to_lunar(jdn)
    return LunarDate(
        year,
        month,
        day,
        seconds // 3600,
        (seconds % 3600) // 60,
        seconds % 60,
        calendar=calendar or backend.variant,
    )


def day_of_week(value: LunarDate) -> int:
    """Day of week with Monday=0 ... Sunday=6.

    JDN 0 fell on a Monday, so the weekday is the JDN modulo 7; this agrees
    with ``datetime.date.weekday()`` on the converted Gregorian date.
    """
    return math.floor(lunar_to_day_index(value) + 0.5) % 7


def to_gregorian(value: LunarDate) -> date:
    return value.to_gregorian()


def from_gregorian(value: date, calendar: CalendarVariant | None = None) -> LunarDate:
    return LunarDate.from_gregorian(value, calendar)
