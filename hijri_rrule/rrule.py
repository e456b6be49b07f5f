"""Recurrence rules evaluated on the Hijri calendar.

This module provides ``HijriRRule``, an RFC 5545 style rule whose periods,
BY-parts and results are all expressed in Hijri dates, with Gregorian views
of the same results.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import date
from typing import Any

from typing_extensions import override

from hijri_rrule.date import LunarDate, to_lunar_date
from hijri_rrule.iterator import (
    IteratorCallback,
    get_after,
    get_all,
    get_before,
    get_between,
    iterate,
)
from hijri_rrule.nlp import to_text
from hijri_rrule.options import RuleOptions, normalize_options, options_to_partial
from hijri_rrule.parser import parse_string
from hijri_rrule.serializer import options_to_string

_MISSING = object()


class RRuleCache:
    """Memoized query results for one rule or rule set.

    Keys use the canonical ``YYYY-MM-DD`` form of the query dates together
    with the inclusive flag.
    """

    def __init__(self) -> None:
        self.all: list[LunarDate] | None = None
        self._after: dict[tuple[str, bool], LunarDate | None] = {}
        self._before: dict[tuple[str, bool], LunarDate | None] = {}
        self._between: dict[tuple[str, str, bool], list[LunarDate]] = {}

    def get_after(self, value: LunarDate, inclusive: bool) -> Any:
        return self._after.get((str(value), inclusive), _MISSING)

    def set_after(self, value: LunarDate, inclusive: bool, result: LunarDate | None) -> None:
        self._after[(str(value), inclusive)] = result

    def get_before(self, value: LunarDate, inclusive: bool) -> Any:
        return self._before.get((str(value), inclusive), _MISSING)

    def set_before(self, value: LunarDate, inclusive: bool, result: LunarDate | None) -> None:
        self._before[(str(value), inclusive)] = result

    def get_between(
        self, after: LunarDate, before: LunarDate, inclusive: bool
    ) -> list[LunarDate] | None:
        return self._between.get((str(after), str(before), inclusive))

    def set_between(
        self, after: LunarDate, before: LunarDate, inclusive: bool, result: list[LunarDate]
    ) -> None:
        self._between[(str(after), str(before), inclusive)] = result

    def clear(self) -> None:
        self.all = None
        self._after.clear()
        self._before.clear()
        self._between.clear()


class RecurrenceBase(ABC):
    """Query methods shared by rules and rule sets.

    Subclasses supply the increasing occurrence stream through ``_iter``.
    Queries without an ``iterator`` callback are memoized when caching is on.
    """

    _cache: RRuleCache | None

    @abstractmethod
    def _iter(self) -> Iterator[LunarDate]:
        """Yield occurrences in strictly increasing order."""

    def _coerce(self, value: Any) -> LunarDate:
        return to_lunar_date(value)

    def _invalidate(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    def __iter__(self) -> Iterator[LunarDate]:
        return self._iter()

    def iter_gregorian(self) -> Iterator[date]:
        return (d.to_gregorian() for d in self._iter())

    def all(
        self, limit: int | None = None, iterator: IteratorCallback | None = None
    ) -> list[LunarDate]:
        """Materialize the occurrences.

        Args:
            limit: Stop after this many occurrences (for unbounded rules)
            iterator: Called as ``iterator(date, index)``; returning False
                stops before that date is included

        Returns:
            Occurrences in increasing order
        """
        if iterator is None and limit is None and self._cache is not None:
            if self._cache.all is None:
                self._cache.all = get_all(self._iter())
            return list(self._cache.all)
        return get_all(self._iter(), limit, iterator)

    def between(
        self,
        after: Any,
        before: Any,
        inclusive: bool = False,
        iterator: IteratorCallback | None = None,
    ) -> list[LunarDate]:
        """Occurrences strictly between two dates (or on them when inclusive)."""
        start, end = self._coerce(after), self._coerce(before)
        if iterator is not None or self._cache is None:
            return get_between(self._iter(), start, end, inclusive, iterator)
        cached = self._cache.get_between(start, end, inclusive)
        if cached is None:
            cached = get_between(self._iter(), start, end, inclusive)
            self._cache.set_between(start, end, inclusive, cached)
        return list(cached)

    def after(self, value: Any, inclusive: bool = False) -> LunarDate | None:
        """First occurrence after a date (or on it when inclusive)."""
        target = self._coerce(value)
        if self._cache is None:
            return get_after(self._iter(), target, inclusive)
        result = self._cache.get_after(target, inclusive)
        if result is _MISSING:
            result = get_after(self._iter(), target, inclusive)
            self._cache.set_after(target, inclusive, result)
        return result

    def before(self, value: Any, inclusive: bool = False) -> LunarDate | None:
        """Last occurrence before a date (or on it when inclusive)."""
        target = self._coerce(value)
        if self._cache is None:
            return get_before(self._iter(), target, inclusive)
        result = self._cache.get_before(target, inclusive)
        if result is _MISSING:
            result = get_before(self._iter(), target, inclusive)
            self._cache.set_before(target, inclusive, result)
        return result

    def all_gregorian(
        self, limit: int | None = None, iterator: IteratorCallback | None = None
    ) -> list[date]:
        return [d.to_gregorian() for d in self.all(limit, iterator)]

    def between_gregorian(
        self, after: Any, before: Any, inclusive: bool = False
    ) -> list[date]:
        return [d.to_gregorian() for d in self.between(after, before, inclusive)]

    def after_gregorian(self, value: Any, inclusive: bool = False) -> date | None:
        found = self.after(value, inclusive)
        return found.to_gregorian() if found is not None else None

    def before_gregorian(self, value: Any, inclusive: bool = False) -> date | None:
        found = self.before(value, inclusive)
        return found.to_gregorian() if found is not None else None


class HijriRRule(RecurrenceBase):
    """A recurrence rule over Hijri dates.

    Iterating a rule yields ``LunarDate`` occurrences in increasing order;
    the ``*_gregorian`` methods return the same occurrences as
    ``datetime.date`` values.

    Examples:
        >>> from dateutil.rrule import YEARLY
        >>> ramadan = HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=3,
        ...                      dtstart=(1446, 9, 1), calendar="islamic-tbla")
        >>> [str(d) for d in ramadan]
        ['1446-09-01', '1447-09-01', '1448-09-01']
        >>> print(ramadan)
        DTSTART;CALENDAR=HIJRI-TABULAR:14460901
        RRULE:FREQ=YEARLY;COUNT=3;BYMONTH=9;BYMONTHDAY=1
    """

    def __init__(self, freq: Any = None, *, cache: bool = True, **options: Any):
        """
        Initialize a rule.

        Args:
            freq: YEARLY, MONTHLY, WEEKLY, DAILY (dateutil constants) or a
                name like "yearly"; sub-daily frequencies walk day by day
            cache: Memoize query results on this rule (default True)
            **options: dtstart, interval, count, until, wkst, tzid, by* parts,
                skip and calendar, as accepted by ``normalize_options``
        """
        self.options: RuleOptions = normalize_options(freq, **options)
        self._cache = RRuleCache() if cache else None

    @classmethod
    def from_string(cls, text: str, cache: bool = True) -> "HijriRRule":
        """Build a rule from RRULE text (optionally preceded by a DTSTART line)."""
        return cls(cache=cache, **parse_string(text))

    @override
    def _iter(self) -> Iterator[LunarDate]:
        return iterate(self.options)

    @override
    def _coerce(self, value: Any) -> LunarDate:
        return to_lunar_date(value, self.options.calendar)

    def count(self) -> int:
        """Number of occurrences (walks the rule unless COUNT is set)."""
        if self.options.count is not None:
            return self.options.count
        return len(self.all())

    def replace(self, **changes: Any) -> "HijriRRule":
        """Return a new rule with some options changed."""
        partial = {**options_to_partial(self.options), **changes}
        return HijriRRule(cache=self._cache is not None, **partial)

    def to_text(self, locale: str = "en") -> str:
        """Describe the rule in English ("en") or Arabic ("ar")."""
        return to_text(self.options, locale)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return options_to_string(self.options)

    def __repr__(self) -> str:
        return f"HijriRRule.from_string({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HijriRRule):
            return NotImplemented
        return self.options == other.options

    __hash__ = None  # type: ignore[assignment]
