"""Immutable Hijri date value."""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, TypeAlias

from hijri_rrule.calendars import CalendarBackend, get_backend
from hijri_rrule.config import CalendarVariant, get_config
from hijri_rrule.errors import InvalidDate, InvalidInput, OutOfRange
from hijri_rrule.util import MONTH_NAMES, Locale

_RRULE_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})(?:T(\d{2})(\d{2})(\d{2}))?Z?$")


@dataclass(frozen=True, order=True)
class LunarDate:
    """A Hijri calendar date with optional wall-clock time.

    Equality, hashing and ordering consider ``(year, month, day)`` only; the
    time fields and the calendar tag are carried along but never compared.

    Args:
        year: Hijri year (>= 1)
        month: Month 1-12 (1 = Muharram, 9 = Ramadan, 12 = Dhu al-Hijjah)
        day: Day of month, 1 through the month's length in ``calendar``
        hour, minute, second: Optional time of day
        calendar: Calendar variant the date is validated against; defaults to
            the configured default calendar

    Examples:
        >>> LunarDate(1446, 9, 1, calendar="islamic-tbla")
        LunarDate(year=1446, month=9, day=1, hour=0, minute=0, second=0, calendar='islamic-tbla')
        >>> str(LunarDate(1446, 9, 1, calendar="islamic-tbla"))
        '1446-09-01'
    """

    year: int
    month: int
    day: int
    hour: int = field(default=0, compare=False)
    minute: int = field(default=0, compare=False)
    second: int = field(default=0, compare=False)
    calendar: CalendarVariant = field(default=None, compare=False, kw_only=True)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        for name in ("year", "month", "day", "hour", "minute", "second"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidInput(
                    f"LunarDate {name} must be an integer, got {value!r}"
                )

        if self.calendar is None:
            object.__setattr__(self, "calendar", get_config().default_calendar)

        if self.year < 1:
            raise OutOfRange(
                f"Hijri year {self.year} precedes the calendar epoch (1 AH)"
            )
        if not 1 <= self.month <= 12:
            raise InvalidInput(
                f"Invalid Hijri month: {self.month}. Must be between 1 and 12."
            )
        if not 1 <= self.day <= 30:
            raise InvalidInput(
                f"Invalid Hijri day: {self.day}. Must be between 1 and 30."
            )
        if not 0 <= self.hour <= 23:
            raise InvalidInput(f"Invalid hour: {self.hour}. Must be between 0 and 23.")
        if not 0 <= self.minute <= 59:
            raise InvalidInput(
                f"Invalid minute: {self.minute}. Must be between 0 and 59."
            )
        if not 0 <= self.second <= 59:
            raise InvalidInput(
                f"Invalid second: {self.second}. Must be between 0 and 59."
            )

        length = self.backend.month_length(self.year, self.month)
        if self.day > length:
            raise InvalidDate(
                f"Invalid Hijri date: {self}\n"
                f"Month {self.month} of {self.year} has {length} days in the "
                f"{self.calendar} calendar.\n"
                f"Hint: use skip='backward' or skip='forward' on a rule to "
                f"resolve missing days instead of constructing them"
            )

    @property
    def backend(self) -> CalendarBackend:
        return get_backend(self.calendar)

    @property
    def has_time(self) -> bool:
        return bool(self.hour or self.minute or self.second)

    def days_in_month(self) -> int:
        return self.backend.month_length(self.year, self.month)

    def days_in_year(self) -> int:
        return self.backend.year_length(self.year)

    def is_leap_year(self) -> bool:
        return self.backend.is_leap_year(self.year)

    def day_of_year(self) -> int:
        """1-based position of this day within its year."""
        backend = self.backend
        return sum(backend.month_length(self.year, m) for m in range(1, self.month)) + self.day

    def weekday(self) -> int:
        """Day of week, Monday=0 through Sunday=6 (as ``date.weekday``)."""
        return self.backend.lunar_to_day_number(self.year, self.month, self.day) % 7

    def to_gregorian(self) -> date:
        return self.backend.lunar_to_gregorian(self.year, self.month, self.day)

    def to_datetime(self) -> datetime:
        g = self.to_gregorian()
        return datetime(g.year, g.month, g.day, self.hour, self.minute, self.second)

    @classmethod
    def from_gregorian(
        cls, value: date, calendar: CalendarVariant | None = None
    ) -> "LunarDate":
        """Convert a Gregorian date (or datetime, keeping its time) to a LunarDate."""
        variant = calendar or get_config().default_calendar
        year, month, day = get_backend(variant).gregorian_to_lunar(value)
        if isinstance(value, datetime):
            return cls(
                year, month, day, value.hour, value.minute, value.second,
                calendar=variant,
            )
        return cls(year, month, day, calendar=variant)

    @classmethod
    def today(cls, calendar: CalendarVariant | None = None) -> "LunarDate":
        return cls.from_gregorian(date.today(), calendar)

    def month_name(self, locale: Locale = "en") -> str:
        return _names(locale)[self.month]

    def format(self, locale: Locale = "en") -> str:
        """Human-readable date, e.g. "1 Ramadan 1446 AH" (en) or "1 رَمَضَان 1446" (ar)."""
        text = f"{self.day} {self.month_name(locale)} {self.year}"
        return text if locale == "ar" else f"{text} AH"

    def isoformat(self) -> str:
        return (
            f"{self}T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )

    def to_rrule_string(self, include_time: bool = False) -> str:
        """Compact RRULE form: YYYYMMDD, or YYYYMMDDTHHMMSS when a time is set."""
        text = f"{self.year:04d}{self.month:02d}{self.day:02d}"
        if include_time or self.has_time:
            text += f"T{self.hour:02d}{self.minute:02d}{self.second:02d}"
        return text

    @classmethod
    def from_rrule_string(
        cls, text: str, calendar: CalendarVariant | None = None
    ) -> "LunarDate":
        match = _RRULE_DATE.match(text.strip())
        if not match:
            raise InvalidInput(
                f"Invalid RRULE date string: {text!r}\n"
                f"Expected YYYYMMDD or YYYYMMDDTHHMMSS, e.g. 14460901"
            )
        parts = [int(g) if g is not None else 0 for g in match.groups()]
        return cls(*parts, calendar=calendar)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


DateLike: TypeAlias = "LunarDate | date | Sequence[int] | Mapping[str, Any]"


def _names(locale: str) -> tuple[str, ...]:
    if locale not in MONTH_NAMES:
        raise InvalidInput(
            f"Unsupported locale: {locale!r}. Supported locales: en, ar"
        )
    return MONTH_NAMES[locale]  # type: ignore[index]


def to_lunar_date(value: Any, calendar: CalendarVariant | None = None) -> LunarDate:
    """Coerce a date-like value to a LunarDate in the given calendar.

    Accepts a LunarDate (re-tagged with ``calendar`` when one is given), a
    Gregorian ``date``/``datetime`` (converted), a ``(year, month, day[, hour,
    minute, second])`` sequence, or a mapping with the same keys.

    Raises:
        InvalidInput: If the value has none of the supported shapes
    """
    if isinstance(value, LunarDate):
        if calendar is None or value.calendar == calendar:
            return value
        return replace(value, calendar=calendar)
    if isinstance(value, date):
        return LunarDate.from_gregorian(value, calendar)
    if isinstance(value, Mapping):
        keys = ("year", "month", "day", "hour", "minute", "second")
        missing = [k for k in keys[:3] if k not in value]
        if missing:
            raise InvalidInput(
                f"Hijri date mapping is missing {', '.join(missing)}: {value!r}"
            )
        return LunarDate(
            **{k: value[k] for k in keys if k in value}, calendar=calendar
        )
    if isinstance(value, Sequence) and not isinstance(value, str) and 3 <= len(value) <= 6:
        return LunarDate(*value, calendar=calendar)  # type: ignore[arg-type]
    raise InvalidInput(
        f"Cannot interpret {value!r} as a Hijri date.\n"
        f"Use a LunarDate, a datetime.date, or a (year, month, day) tuple.\n"
        f"Example: LunarDate(1446, 9, 1)"
    )
