"""Arithmetic on Hijri dates.

All helpers take and return ``LunarDate`` values and work in the calendar the
input date is tagged with. Time-of-day fields are carried through unchanged.
"""

import math
from dataclasses import replace

from dateutil.rrule import SU

from hijri_rrule.calendars import get_backend
from hijri_rrule.calendars.tabular import EPOCH_JDN
from hijri_rrule.config import CalendarVariant, get_config
from hijri_rrule.date import LunarDate
from hijri_rrule.dateindex import day_index_to_lunar, day_of_week, lunar_to_day_index
from hijri_rrule.errors import InvalidInput, OutOfRange

DEFAULT_WEEK_START = SU.weekday


def _variant(calendar: CalendarVariant | None) -> CalendarVariant:
    return calendar or get_config().default_calendar


def add_days(value: LunarDate, days: int) -> LunarDate:
    """Shift a date by a number of days (negative moves backward)."""
    if days == 0:
        return value
    index = lunar_to_day_index(value) + days
    return day_index_to_lunar(index, value.backend, value.calendar)


def add_months(value: LunarDate, months: int, clamp: bool = True) -> LunarDate | None:
    """Shift a date by whole months.

    Args:
        value: Starting date
        months: Months to add (may be negative)
        clamp: When the day does not exist in the target month, truncate it to
            the month's last day (True) or return None (False)

    Returns:
        The shifted date, or None when ``clamp`` is False and the day is missing

    Raises:
        OutOfRange: If the result would precede year 1

    Examples:
        >>> d = LunarDate(1446, 1, 30, calendar="islamic-tbla")
        >>> str(add_months(d, 1))
        '1446-02-29'
        >>> add_months(d, 1, clamp=False) is None
        True
    """
    total = (value.year - 1) * 12 + (value.month - 1) + months
    year, month = total // 12 + 1, total % 12 + 1
    return _shift(value, year, month, clamp)


def add_years(value: LunarDate, years: int, clamp: bool = True) -> LunarDate | None:
    """Shift a date by whole years; same clamp contract as add_months."""
    return _shift(value, value.year + years, value.month, clamp)


def _shift(value: LunarDate, year: int, month: int, clamp: bool) -> LunarDate | None:
    if year < 1:
        raise OutOfRange(
            f"Shifting {value} lands in year {year}, before the calendar epoch (1 AH)"
        )
    if (year, month) == (value.year, value.month):
        return value
    length = value.backend.month_length(year, month)
    day = value.day
    if day > length:
        if not clamp:
            return None
        day = length
    return replace(value, year=year, month=month, day=day)


def diff_days(a: LunarDate, b: LunarDate) -> int:
    """Whole days from b to a (positive when a is later)."""
    return a.backend.lunar_to_day_number(a.year, a.month, a.day) - b.backend.lunar_to_day_number(
        b.year, b.month, b.day
    )


def diff_months(a: LunarDate, b: LunarDate) -> int:
    """Calendar months from b to a, ignoring the day of month."""
    return (a.year - b.year) * 12 + (a.month - b.month)


def diff_years(a: LunarDate, b: LunarDate) -> int:
    return a.year - b.year


def nth_weekday_of_month(
    year: int,
    month: int,
    weekday: int,
    n: int,
    calendar: CalendarVariant | None = None,
) -> LunarDate | None:
    """Find the nth given weekday in a month.

    Args:
        year: Hijri year
        month: Month 1-12
        weekday: Monday=0 ... Sunday=6
        n: 1 for the first occurrence, 2 for the second, -1 for the last, ...
        calendar: Calendar variant (defaults to the configured default)

    Returns:
        The matching date, or None when n is 0 or the month has fewer than |n|
        matching weekdays

    Examples:
        >>> str(nth_weekday_of_month(1446, 9, 4, -1, "islamic-tbla"))  # last Friday
        '1446-09-28'
    """
    if n == 0:
        return None
    variant = _variant(calendar)
    backend = get_backend(variant)
    length = backend.month_length(year, month)
    first_weekday = backend.lunar_to_day_number(year, month, 1) % 7

    matches = [
        day
        for day in range(1, length + 1)
        if (first_weekday + day - 1) % 7 == weekday
    ]
    if abs(n) > len(matches):
        return None
    day = matches[n - 1] if n > 0 else matches[n]
    return LunarDate(year, month, day, calendar=variant)


def start_of_month(value: LunarDate) -> LunarDate:
    return replace(value, day=1)


def end_of_month(value: LunarDate) -> LunarDate:
    return replace(value, day=value.days_in_month())


def start_of_year(value: LunarDate) -> LunarDate:
    return replace(value, month=1, day=1)


def end_of_year(value: LunarDate) -> LunarDate:
    return replace(value, month=12, day=value.backend.month_length(value.year, 12))


def start_of_week(value: LunarDate, week_start: int = DEFAULT_WEEK_START) -> LunarDate:
    """First day of the week containing value (weeks start on Sunday by default)."""
    return add_days(value, -((day_of_week(value) - week_start) % 7))


def end_of_week(value: LunarDate, week_start: int = DEFAULT_WEEK_START) -> LunarDate:
    week_end = (week_start + 6) % 7
    return add_days(value, (week_end - day_of_week(value)) % 7)


def week_of_year(value: LunarDate, week_start: int = DEFAULT_WEEK_START) -> int:
    """Week number within the Hijri year.

    Days before the first full week (one that begins on ``week_start``) form
    week 1. When such a partial week exists, the first full week is week 2;
    when the year begins on ``week_start`` the first full week is week 1.
    """
    first = replace(value, month=1, day=1)
    lead = (week_start - day_of_week(first)) % 7
    doy = value.day_of_year()
    if doy <= lead:
        return 1
    return math.ceil((doy - lead) / 7) + (1 if lead > 0 else 0)


def is_same_year(a: LunarDate, b: LunarDate) -> bool:
    return a.year == b.year


def is_same_month(a: LunarDate, b: LunarDate) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def is_same_week(a: LunarDate, b: LunarDate, week_start: int = DEFAULT_WEEK_START) -> bool:
    return start_of_week(a, week_start) == start_of_week(b, week_start)


def is_same_day(a: LunarDate, b: LunarDate) -> bool:
    return a == b


def days_before_month(year: int, month: int, calendar: CalendarVariant | None = None) -> int:
    """Days in the year that precede the first of ``month``.

    Examples:
        >>> days_before_month(1446, 9, "islamic-tbla")
        236
    """
    backend = get_backend(_variant(calendar))
    backend.check_month(month)
    return sum(backend.month_length(year, m) for m in range(1, month))


def day_of_year(value: LunarDate) -> int:
    """1-based day of the year, e.g. 237 for 1 Ramadan in a tabular year."""
    return value.day_of_year()


def day_of_year_to_month_day(
    year: int, doy: int, calendar: CalendarVariant | None = None
) -> tuple[int, int]:
    """Resolve a 1-based day of the year to (month, day).

    Raises:
        InvalidInput: If doy is outside 1..year_length
    """
    backend = get_backend(_variant(calendar))
    length = backend.year_length(year)
    if not 1 <= doy <= length:
        raise InvalidInput(
            f"Invalid day of year: {doy}. Must be between 1 and {length}."
        )
    remaining = doy
    for month in range(1, 13):
        month_length = backend.month_length(year, month)
        if remaining <= month_length:
            return month, remaining
        remaining -= month_length
    raise AssertionError("unreachable: month lengths do not sum to year length")


def days_before_year(year: int, calendar: CalendarVariant | None = None) -> int:
    """Days from the epoch (1 Muharram 1 AH) to 1 Muharram of ``year``."""
    if year < 1:
        raise OutOfRange(f"Invalid Hijri year: {year}. Must be >= 1.")
    backend = get_backend(_variant(calendar))
    return backend.lunar_to_day_number(year, 1, 1) - EPOCH_JDN
