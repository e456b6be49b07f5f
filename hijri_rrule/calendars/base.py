"""Abstract calendar backend shared by the tabular and observational variants."""

from abc import ABC, abstractmethod
from datetime import date

from hijri_rrule.config import CalendarVariant
from hijri_rrule.errors import ConversionFailure, InvalidInput, OutOfRange
from hijri_rrule.julian import gregorian_to_jdn, jdn_to_gregorian
from hijri_rrule.util import MAX_MONTH, MIN_MONTH

LunarTriple = tuple[int, int, int]


class CalendarBackend(ABC):
    """Month-length and conversion oracle for one Hijri calendar variant.

    Backends deal in plain ``(year, month, day)`` triples and ``datetime.date``
    values; they know nothing about ``LunarDate``. Everything above this layer
    (date math, the recurrence generator) is written against this interface
    only.
    """

    variant: CalendarVariant

    @abstractmethod
    def month_length(self, year: int, month: int) -> int:
        """Number of days (29 or 30) in the given month."""

    @abstractmethod
    def gregorian_to_lunar(self, value: date) -> LunarTriple:
        """Convert a Gregorian date to a lunar (year, month, day)."""

    @abstractmethod
    def lunar_to_gregorian(self, year: int, month: int, day: int) -> date:
        """Convert a lunar date to its Gregorian date."""

    def is_leap_year(self, year: int) -> bool:
        return self.month_length(year, 12) == 30

    def year_length(self, year: int) -> int:
        return sum(self.month_length(year, m) for m in range(MIN_MONTH, MAX_MONTH + 1))

    def is_valid_date(self, year: int, month: int, day: int) -> bool:
        """True iff the triple names a real day in this calendar."""
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (year, month, day)):
            return False
        if year < 1 or not MIN_MONTH <= month <= MAX_MONTH or day < 1:
            return False
        try:
            return day <= self.month_length(year, month)
        except (ConversionFailure, OutOfRange):
            return False

    def lunar_to_day_number(self, year: int, month: int, day: int) -> int:
        """Julian Day Number of a lunar date."""
        g = self.lunar_to_gregorian(year, month, day)
        return gregorian_to_jdn(g.year, g.month, g.day)

    def day_number_to_lunar(self, jdn: int) -> LunarTriple:
        """Lunar date named by a Julian Day Number."""
        return self.gregorian_to_lunar(jdn_to_gregorian(jdn))

    def check_month(self, month: int) -> None:
        """Raise InvalidInput unless month is 1-12."""
        if not isinstance(month, int) or not MIN_MONTH <= month <= MAX_MONTH:
            raise InvalidInput(
                f"Invalid Hijri month: {month!r}. Must be between 1 and 12."
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.variant!r})"
