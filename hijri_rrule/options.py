"""Validation and normalization of recurrence rule options.

``normalize_options`` turns sparse user input (scalars or lists, Gregorian or
Hijri dates, weekday codes) into a canonical, immutable ``RuleOptions``. It
is the only place the process-wide default calendar is consulted.
"""

from collections.abc import Iterable
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from dateutil.rrule import FREQNAMES, SECONDLY, SU, YEARLY, weekday

from hijri_rrule.config import CALENDAR_VARIANTS, CalendarVariant, get_config
from hijri_rrule.date import LunarDate, to_lunar_date
from hijri_rrule.errors import InvalidInput, InvalidRule
from hijri_rrule.weekday import as_weekday


class Skip(str, Enum):
    """How to resolve a requested day-of-month that a month does not have."""

    OMIT = "omit"
    FORWARD = "forward"
    BACKWARD = "backward"


_FREQ_MAP = {name.lower(): value for value, name in enumerate(FREQNAMES)}


@dataclass(frozen=True, kw_only=True)
class RuleOptions:
    """Canonical rule options.

    Every ``by*`` field is either None or a non-empty tuple. Month days are
    split by sign (``bymonthday`` positive, ``bynmonthday`` negative) and
    weekdays by ordinal (``byweekday`` plain, ``bynweekday`` with ``n``).
    """

    freq: int
    dtstart: LunarDate
    interval: int = 1
    wkst: int = SU.weekday
    count: int | None = None
    until: LunarDate | None = None
    tzid: str | None = None
    bysetpos: tuple[int, ...] | None = None
    bymonth: tuple[int, ...] | None = None
    bymonthday: tuple[int, ...] | None = None
    bynmonthday: tuple[int, ...] | None = None
    byyearday: tuple[int, ...] | None = None
    byweekno: tuple[int, ...] | None = None
    byweekday: tuple[weekday, ...] | None = None
    bynweekday: tuple[weekday, ...] | None = None
    byhour: tuple[int, ...] | None = None
    byminute: tuple[int, ...] | None = None
    bysecond: tuple[int, ...] | None = None
    skip: Skip = Skip.OMIT
    calendar: CalendarVariant = "islamic-umalqura"

    @property
    def freq_name(self) -> str:
        return FREQNAMES[self.freq]


def _as_list(value: Any) -> list[Any] | None:
    if value is None:
        return None
    if isinstance(value, (str, weekday)) or not isinstance(value, Iterable):
        return [value]
    items = list(value)
    return items or None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _int_tuple(
    name: str,
    value: Any,
    low: int | None = None,
    high: int | None = None,
    allow_zero: bool = True,
) -> tuple[int, ...] | None:
    items = _as_list(value)
    if items is None:
        return None
    for item in items:
        valid = (
            _is_int(item)
            and (low is None or low <= item <= high)
            and (allow_zero or item != 0)
        )
        if not valid:
            if low is None:
                hint = "Must be an integer"
            else:
                hint = f"Must be between {low} and {high}"
                if not allow_zero:
                    hint += " (excluding 0)"
            raise InvalidRule(f"Invalid {name}: {item!r}. {hint}.")
    return tuple(items)


def _freq(value: Any) -> int:
    if value is None:
        raise InvalidRule(
            "freq is required.\n"
            "Example: normalize_options(freq=YEARLY, bymonth=9, bymonthday=1)"
        )
    if isinstance(value, str) and value.lower() in _FREQ_MAP:
        return _FREQ_MAP[value.lower()]
    if _is_int(value) and YEARLY <= value <= SECONDLY:
        return value
    valid = ", ".join(FREQNAMES)
    raise InvalidRule(f"Invalid freq: {value!r}\nValid frequencies: {valid}\n")


def _skip(value: Any) -> Skip:
    if value is None:
        return Skip.OMIT
    try:
        return Skip(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidRule(
            f"Invalid skip: {value!r}. Must be one of omit, forward, backward."
        ) from None


def _calendar(value: Any) -> CalendarVariant:
    if value is None:
        return get_config().default_calendar
    if value not in CALENDAR_VARIANTS:
        valid = ", ".join(CALENDAR_VARIANTS)
        raise InvalidRule(f"Invalid calendar: {value!r}\nValid calendars: {valid}\n")
    return value


def _weekdays(value: Any) -> tuple[tuple[weekday, ...] | None, tuple[weekday, ...] | None]:
    items = _as_list(value)
    if items is None:
        return None, None
    try:
        parsed = [as_weekday(item) for item in items]
    except InvalidInput as exc:
        raise InvalidRule(f"Invalid byweekday: {exc}") from exc
    simple = tuple(wd for wd in parsed if not wd.n)
    nth = tuple(wd for wd in parsed if wd.n)
    return simple or None, nth or None


def _date(name: str, value: Any, calendar: CalendarVariant) -> LunarDate:
    try:
        return to_lunar_date(value, calendar)
    except InvalidInput as exc:
        raise InvalidRule(f"Invalid {name}: {exc}") from exc


def normalize_options(
    freq: Any = None,
    *,
    dtstart: Any = None,
    interval: int | None = None,
    wkst: Any = None,
    count: int | None = None,
    until: Any = None,
    tzid: str | None = None,
    bysetpos: Any = None,
    bymonth: Any = None,
    bymonthday: Any = None,
    byyearday: Any = None,
    byweekno: Any = None,
    byweekday: Any = None,
    byhour: Any = None,
    byminute: Any = None,
    bysecond: Any = None,
    skip: Any = None,
    calendar: CalendarVariant | None = None,
) -> RuleOptions:
    """Validate sparse rule options and expand them to canonical form.

    Args:
        freq: YEARLY..SECONDLY (dateutil constants) or a name like "monthly"
        dtstart: First date; LunarDate, Gregorian date/datetime, or
            (year, month, day). Defaults to today in the rule's calendar
        interval: Periods between recurrences (default 1)
        wkst: Week start (0-6, code like "SU", or dateutil weekday; default SU)
        count: Maximum number of occurrences
        until: Last allowed date (inclusive), same shapes as dtstart
        tzid: Time zone name, carried but not applied
        by*: Scalar or iterable filters (see RFC 5545 BYxxx parts)
        skip: "omit", "forward" or "backward" for missing days (default omit)
        calendar: "islamic-umalqura" or "islamic-tbla" (default from config)

    Returns:
        RuleOptions with every by* field either None or a non-empty tuple

    Raises:
        InvalidRule: Naming the offending field on any validation failure

    Examples:
        >>> opts = normalize_options("monthly", bymonthday=[1, -1], calendar="islamic-tbla",
        ...                          dtstart=(1446, 1, 1))
        >>> opts.bymonthday, opts.bynmonthday
        ((1,), (-1,))
    """
    frequency = _freq(freq)

    if interval is None:
        interval = 1
    if not _is_int(interval) or interval < 1:
        raise InvalidRule(
            f"Invalid interval: {interval!r}. Must be a positive integer."
        )
    if count is not None and (not _is_int(count) or count < 0):
        raise InvalidRule(
            f"Invalid count: {count!r}. Must be a non-negative integer."
        )

    variant = _calendar(calendar)
    start = (
        _date("dtstart", dtstart, variant)
        if dtstart is not None
        else LunarDate.today(variant)
    )
    end = _date("until", until, variant) if until is not None else None

    if wkst is None:
        week_start = SU.weekday
    else:
        try:
            week_start = as_weekday(wkst).weekday
        except InvalidInput as exc:
            raise InvalidRule(f"Invalid wkst: {exc}") from exc

    monthdays = _int_tuple("bymonthday", bymonthday, -30, 30, allow_zero=False) or ()
    positive = tuple(d for d in monthdays if d > 0) or None
    negative = tuple(d for d in monthdays if d < 0) or None
    simple, nth = _weekdays(byweekday)

    return RuleOptions(
        freq=frequency,
        dtstart=start,
        interval=interval,
        wkst=week_start,
        count=count,
        until=end,
        tzid=tzid or None,
        bysetpos=_int_tuple("bysetpos", bysetpos, -366, 366, allow_zero=False),
        bymonth=_int_tuple("bymonth", bymonth, 1, 12),
        bymonthday=positive,
        bynmonthday=negative,
        byyearday=_int_tuple("byyearday", byyearday, -355, 355, allow_zero=False),
        byweekno=_int_tuple("byweekno", byweekno),
        byweekday=simple,
        bynweekday=nth,
        byhour=_int_tuple("byhour", byhour, 0, 23),
        byminute=_int_tuple("byminute", byminute, 0, 59),
        bysecond=_int_tuple("bysecond", bysecond, 0, 59),
        skip=_skip(skip),
        calendar=variant,
    )


def options_to_partial(options: RuleOptions) -> dict[str, Any]:
    """Invert the sign/ordinal splits, giving input that normalizes back to options."""
    partial: dict[str, Any] = {}
    for f in fields(RuleOptions):
        if f.name in ("bynmonthday", "bynweekday"):
            continue
        value = getattr(options, f.name)
        if value is not None:
            partial[f.name] = value

    monthdays = (options.bymonthday or ()) + (options.bynmonthday or ())
    if monthdays:
        partial["bymonthday"] = monthdays
    weekdays = (options.byweekday or ()) + (options.bynweekday or ())
    if weekdays:
        partial["byweekday"] = weekdays
    return partial

