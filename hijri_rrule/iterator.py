"""Recurrence generation over the Hijri calendar.

``iterate`` walks the rule period by period (a year, month, week or day per
``interval``), expands each period into candidate days using the BY-parts,
and yields the surviving candidates in strictly increasing order. Each call
starts over from ``dtstart``; abandoning the generator needs no cleanup.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from itertools import count as counter

from dateutil.rrule import DAILY, MONTHLY, WEEKLY, YEARLY

from hijri_rrule.calendars import CalendarBackend, get_backend
from hijri_rrule.date import LunarDate
from hijri_rrule.datemath import add_days, add_months, add_years, nth_weekday_of_month
from hijri_rrule.options import RuleOptions, Skip

logger = logging.getLogger(__name__)

# Safety bounds on the number of periods walked
UNBOUNDED_PERIOD_LIMIT = 100_000
PERIODS_PER_OCCURRENCE = 100
MIN_PERIOD_LIMIT = 1_000

Day = tuple[int, int, int]
IteratorCallback = Callable[[LunarDate, int], "bool | None"]


def resolve_day(
    backend: CalendarBackend, year: int, month: int, day: int, skip: Skip
) -> Day | None:
    """Resolve a requested day of month that may not exist.

    Returns the day unchanged when it exists. Past the end of the month,
    OMIT drops it (None), BACKWARD uses the month's last day and FORWARD the
    first day of the following month.
    """
    if day < 1:
        return None
    length = backend.month_length(year, month)
    if day <= length:
        return year, month, day
    if skip is Skip.BACKWARD:
        return year, month, length
    if skip is Skip.FORWARD:
        return (year + 1, 1, 1) if month == 12 else (year, month + 1, 1)
    return None


def _first_weekday(backend: CalendarBackend, year: int, month: int) -> int:
    return backend.lunar_to_day_number(year, month, 1) % 7


def _weekday_of(backend: CalendarBackend, day: Day) -> int:
    return backend.lunar_to_day_number(*day) % 7


def _month_candidates(
    options: RuleOptions, backend: CalendarBackend, year: int, month: int, default_day: int
) -> list[Day]:
    """Day candidates within one month, from the first BY-part that applies."""
    if options.bymonthday:
        resolved = (
            resolve_day(backend, year, month, day, options.skip)
            for day in options.bymonthday
        )
        return [day for day in resolved if day is not None]

    length = backend.month_length(year, month)

    if options.bynmonthday:
        return [
            (year, month, length + offset + 1)
            for offset in options.bynmonthday
            if length + offset + 1 >= 1
        ]

    if options.bynweekday:
        found = (
            nth_weekday_of_month(year, month, wd.weekday, wd.n, options.calendar)
            for wd in options.bynweekday
        )
        return [(d.year, d.month, d.day) for d in found if d is not None]

    if options.byweekday:
        wanted = {wd.weekday for wd in options.byweekday}
        first = _first_weekday(backend, year, month)
        return [
            (year, month, day)
            for day in range(1, length + 1)
            if (first + day - 1) % 7 in wanted
        ]

    return [(year, month, min(default_day, length))]


def _year_day(backend: CalendarBackend, year: int, offset: int) -> Day | None:
    length = backend.year_length(year)
    remaining = offset if offset > 0 else length + offset + 1
    if not 1 <= remaining <= length:
        return None
    for month in range(1, 13):
        month_length = backend.month_length(year, month)
        if remaining <= month_length:
            return year, month, remaining
        remaining -= month_length
    return None


def _yearly(options: RuleOptions, backend: CalendarBackend, cursor: LunarDate) -> list[Day]:
    year = cursor.year
    candidates: list[Day] = []

    if options.bymonth:
        for month in options.bymonth:
            candidates.extend(_month_candidates(options, backend, year, month, cursor.day))
    elif options.bymonthday or options.bynmonthday:
        candidates = _month_candidates(options, backend, year, cursor.month, cursor.day)
    elif options.byyearday:
        resolved = (_year_day(backend, year, offset) for offset in options.byyearday)
        candidates = [day for day in resolved if day is not None]
    else:
        candidates = [(year, cursor.month, cursor.day)]

    if options.byweekday and not options.bymonth:
        wanted = {wd.weekday for wd in options.byweekday}
        candidates = [day for day in candidates if _weekday_of(backend, day) in wanted]

    return candidates


def _monthly(options: RuleOptions, backend: CalendarBackend, cursor: LunarDate) -> list[Day]:
    if options.bymonth and cursor.month not in options.bymonth:
        return []
    return _month_candidates(options, backend, cursor.year, cursor.month, cursor.day)


def _weekly(options: RuleOptions, backend: CalendarBackend, cursor: LunarDate) -> list[Day]:
    if not options.byweekday:
        days = [cursor]
    else:
        wanted = {wd.weekday for wd in options.byweekday}
        start = cursor.weekday()
        days = [add_days(cursor, i) for i in range(7) if (start + i) % 7 in wanted]
    return [
        (d.year, d.month, d.day)
        for d in days
        if not options.bymonth or d.month in options.bymonth
    ]


def _daily(options: RuleOptions, backend: CalendarBackend, cursor: LunarDate) -> list[Day]:
    if options.bymonth and cursor.month not in options.bymonth:
        return []
    if options.bymonthday or options.bynmonthday:
        length = cursor.days_in_month()
        wanted = set(options.bymonthday or ()) | {
            length + offset + 1 for offset in options.bynmonthday or ()
        }
        if cursor.day not in wanted:
            return []
    if options.byweekday and cursor.weekday() not in {wd.weekday for wd in options.byweekday}:
        return []
    return [(cursor.year, cursor.month, cursor.day)]


def _candidates(options: RuleOptions, backend: CalendarBackend, cursor: LunarDate) -> list[Day]:
    if options.freq == YEARLY:
        days = _yearly(options, backend, cursor)
    elif options.freq == MONTHLY:
        days = _monthly(options, backend, cursor)
    elif options.freq == WEEKLY:
        days = _weekly(options, backend, cursor)
    elif options.freq == DAILY:
        days = _daily(options, backend, cursor)
    else:
        # Sub-daily frequencies are walked at day granularity
        days = [(cursor.year, cursor.month, cursor.day)]
    return sorted(set(days))


def apply_bysetpos(candidates: list[Day], positions: tuple[int, ...]) -> list[Day]:
    """Pick 1-based positions (negative counts from the end) from a sorted period."""
    size = len(candidates)
    picked = set()
    for pos in positions:
        index = pos - 1 if pos > 0 else size + pos
        if 0 <= index < size:
            picked.add(candidates[index])
    return sorted(picked)


def _cursor(options: RuleOptions, period: int) -> LunarDate:
    """Start of the given period, computed from dtstart so day clamping never drifts."""
    start = options.dtstart
    step = period * options.interval
    if options.freq == YEARLY:
        return add_years(start, step)  # type: ignore[return-value]
    if options.freq == MONTHLY:
        return add_months(start, step)  # type: ignore[return-value]
    if options.freq == WEEKLY:
        return add_days(start, 7 * step)
    if options.freq == DAILY:
        return add_days(start, step)
    return add_days(start, period)


def _period_start(options: RuleOptions, cursor: LunarDate) -> Day:
    if options.freq == YEARLY:
        return cursor.year, 1, 1
    if options.freq == MONTHLY:
        return cursor.year, cursor.month, 1
    return cursor.year, cursor.month, cursor.day


def period_limit(options: RuleOptions) -> int:
    if options.count is None:
        return UNBOUNDED_PERIOD_LIMIT
    return max(options.count * PERIODS_PER_OCCURRENCE, MIN_PERIOD_LIMIT)


def iterate(options: RuleOptions) -> Iterator[LunarDate]:
    """Lazily generate the occurrences of a normalized rule.

    Occurrences are strictly increasing. Candidates before ``dtstart`` are
    skipped; the walk stops at the first candidate after ``until``, after
    ``count`` occurrences, or when the period safety bound is reached.

    Examples:
        >>> from hijri_rrule.options import normalize_options
        >>> opts = normalize_options("yearly", bymonth=9, bymonthday=1, count=2,
        ...                          dtstart=(1446, 9, 1), calendar="islamic-tbla")
        >>> [str(d) for d in iterate(opts)]
        ['1446-09-01', '1447-09-01']
    """
    if options.count == 0:
        return

    backend = get_backend(options.calendar)
    start = options.dtstart
    start_key = (start.year, start.month, start.day)
    until_key = (
        (options.until.year, options.until.month, options.until.day)
        if options.until is not None
        else None
    )

    last: Day | None = None
    emitted = 0
    limit = period_limit(options)

    for period in counter():
        if period >= limit:
            logger.debug(
                "Stopped %s rule after %d periods without reaching its end",
                options.freq_name,
                period,
            )
            return

        cursor = _cursor(options, period)
        if until_key is not None and _period_start(options, cursor) > until_key:
            return

        days = _candidates(options, backend, cursor)
        if options.bysetpos:
            days = apply_bysetpos(days, options.bysetpos)

        for day in days:
            if day < start_key or (last is not None and day <= last):
                continue
            if until_key is not None and day > until_key:
                return
            yield LunarDate(
                *day,
                start.hour,
                start.minute,
                start.second,
                calendar=options.calendar,
            )
            last = day
            emitted += 1
            if options.count is not None and emitted >= options.count:
                return


def get_all(
    occurrences: Iterable[LunarDate],
    limit: int | None = None,
    iterator: IteratorCallback | None = None,
) -> list[LunarDate]:
    """Materialize occurrences, stopping early at ``limit`` or when ``iterator`` returns False.

    ``occurrences`` is any increasing stream, e.g. ``iterate(options)``.
    """
    result: list[LunarDate] = []
    for index, value in enumerate(occurrences):
        if limit is not None and index >= limit:
            break
        if iterator is not None and iterator(value, index) is False:
            break
        result.append(value)
    return result


def get_between(
    occurrences: Iterable[LunarDate],
    after: LunarDate,
    before: LunarDate,
    inclusive: bool = False,
    iterator: IteratorCallback | None = None,
) -> list[LunarDate]:
    result: list[LunarDate] = []
    for value in occurrences:
        if value > before or (value == before and not inclusive):
            break
        if value > after or (inclusive and value == after):
            if iterator is not None and iterator(value, len(result)) is False:
                break
            result.append(value)
    return result


def get_after(
    occurrences: Iterable[LunarDate], value: LunarDate, inclusive: bool = False
) -> LunarDate | None:
    for candidate in occurrences:
        if candidate > value or (inclusive and candidate == value):
            return candidate
    return None


def get_before(
    occurrences: Iterable[LunarDate], value: LunarDate, inclusive: bool = False
) -> LunarDate | None:
    last: LunarDate | None = None
    for candidate in occurrences:
        if candidate < value or (inclusive and candidate == value):
            last = candidate
        else:
            break
    return last
