"""Tabular (arithmetical) Hijri calendar.

Fixed 30-year cycle of 10631 days with leap years at cycle positions
2, 5, 7, 10, 13, 16, 18, 21, 24, 26 and 29 (Type IIa, the ``islamic-tbla``
calendar). Fully deterministic; no external data.
"""

import math
from datetime import date

from typing_extensions import override

from hijri_rrule.calendars.base import CalendarBackend, LunarTriple
from hijri_rrule.config import CalendarVariant
from hijri_rrule.errors import InvalidDate, OutOfRange
from hijri_rrule.julian import gregorian_to_jdn, jdn_to_gregorian
from hijri_rrule.util import (
    COMMON_YEAR_DAYS,
    DAYS_BEFORE_MONTH,
    HIJRI_EPOCH_JD,
    LEAP_YEAR_DAYS,
    LEAP_YEARS_IN_CYCLE,
    LUNAR_CYCLE_DAYS,
    LUNAR_CYCLE_YEARS,
    MONTH_DAYS,
    is_tabular_leap_year,
)

# JDN of 1 Muharram 1 AH
EPOCH_JDN = math.floor(HIJRI_EPOCH_JD + 0.5)

# Days from the start of a cycle to the start of each of its 30 years
_YEAR_OFFSETS: tuple[int, ...] = tuple(
    sum(
        LEAP_YEAR_DAYS if y in LEAP_YEARS_IN_CYCLE else COMMON_YEAR_DAYS
        for y in range(1, position)
    )
    for position in range(1, LUNAR_CYCLE_YEARS + 1)
)


class TabularBackend(CalendarBackend):
    variant: CalendarVariant = "islamic-tbla"

    @override
    def is_leap_year(self, year: int) -> bool:
        return is_tabular_leap_year(year)

    @override
    def year_length(self, year: int) -> int:
        return LEAP_YEAR_DAYS if self.is_leap_year(year) else COMMON_YEAR_DAYS

    @override
    def month_length(self, year: int, month: int) -> int:
        self.check_month(month)
        if month == 12 and self.is_leap_year(year):
            return 30
        return MONTH_DAYS[month - 1]

    @override
    def lunar_to_day_number(self, year: int, month: int, day: int) -> int:
        if year < 1:
            raise OutOfRange(f"Hijri year {year} precedes the calendar epoch (1 AH)")
        if not self.is_valid_date(year, month, day):
            self.check_month(month)
            raise InvalidDate(
                f"Invalid Hijri date: {year:04d}-{month:02d}-{day:02d}\n"
                f"Month {month} of {year} has {self.month_length(year, month)} days"
            )

        cycles, position = divmod(year - 1, LUNAR_CYCLE_YEARS)
        days = (
            cycles * LUNAR_CYCLE_DAYS
            + _YEAR_OFFSETS[position]
            + DAYS_BEFORE_MONTH[month - 1]
            + day
            - 1
        )
        return EPOCH_JDN + days

    @override
    def day_number_to_lunar(self, jdn: int) -> LunarTriple:
        days = jdn - EPOCH_JDN
        if days < 0:
            raise OutOfRange(
                f"Julian Day Number {jdn} is before the Hijri epoch (1 Muharram 1 AH)"
            )

        cycles, remaining = divmod(days, LUNAR_CYCLE_DAYS)
        position = 0
        for index, offset in enumerate(_YEAR_OFFSETS):
            if offset > remaining:
                break
            position = index
        remaining -= _YEAR_OFFSETS[position]
        year = cycles * LUNAR_CYCLE_YEARS + position + 1

        month = 1
        while month < 12 and remaining >= self.month_length(year, month):
            remaining -= self.month_length(year, month)
            month += 1
        return year, month, remaining + 1

    @override
    def gregorian_to_lunar(self, value: date) -> LunarTriple:
        return self.day_number_to_lunar(
            gregorian_to_jdn(value.year, value.month, value.day)
        )

    @override
    def lunar_to_gregorian(self, year: int, month: int, day: int) -> date:
        return jdn_to_gregorian(self.lunar_to_day_number(year, month, day))
