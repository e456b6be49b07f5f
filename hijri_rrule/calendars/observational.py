"""Observational (Umm al-Qura) Hijri calendar backed by ``hijridate``.

The host library is consulted only in the Gregorian -> Hijri direction. The
reverse conversion searches Gregorian days around an estimate, and month
lengths are found by probing whether day 30 of a month exists. Probed month
lengths are memoized in a bounded LRU cache.
"""

import logging
import threading
from collections import OrderedDict
from datetime import date

from hijridate import Gregorian
from typing_extensions import override

from hijri_rrule.calendars.base import CalendarBackend, LunarTriple
from hijri_rrule.config import CalendarVariant
from hijri_rrule.errors import ConversionFailure, InvalidDate, OutOfRange
from hijri_rrule.util import HIJRI_EPOCH_ORDINAL, MEAN_MONTH_DAYS, MEAN_YEAR_DAYS

logger = logging.getLogger(__name__)

# Half-width, in days, of the Gregorian window searched around an estimate
SEARCH_WINDOW = 60


class MonthLengthCache:
    """Least-recently-used map from (year, month) to a month length."""

    def __init__(self, max_size: int = 500):
        self.max_size: int = max_size
        self._entries: OrderedDict[tuple[int, int], int] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: tuple[int, int]) -> int | None:
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self._entries.move_to_end(key)
            return value

    def put(self, key: tuple[int, int], value: int) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted month length for %s from cache", evicted)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: tuple[int, int]) -> bool:
        return key in self._entries


def host_calendar_available() -> bool:
    """Check that hijridate can convert a known date."""
    try:
        Gregorian(2000, 1, 1).to_hijri()
    except (ValueError, OverflowError) as exc:
        logger.debug("Umm al-Qura conversion probe failed: %s", exc)
        return False
    return True


class ObservationalBackend(CalendarBackend):
    variant: CalendarVariant = "islamic-umalqura"

    def __init__(self, cache_enabled: bool = True, cache_max_size: int = 500):
        self.cache: MonthLengthCache | None = (
            MonthLengthCache(cache_max_size) if cache_enabled else None
        )

    @override
    def gregorian_to_lunar(self, value: date) -> LunarTriple:
        try:
            hijri = Gregorian(value.year, value.month, value.day).to_hijri()
        except (ValueError, OverflowError) as exc:
            raise ConversionFailure(
                f"Umm al-Qura calendar cannot convert {value.isoformat()}: {exc}\n"
                f"Hint: use calendar='islamic-tbla' for dates outside the "
                f"Umm al-Qura tables"
            ) from exc
        return hijri.datetuple()

    @override
    def lunar_to_gregorian(self, year: int, month: int, day: int) -> date:
        self.check_month(month)
        if year < 1:
            raise OutOfRange(f"Hijri year {year} precedes the calendar epoch (1 AH)")
        if not 1 <= day <= 30:
            raise InvalidDate(
                f"Invalid Hijri day: {day}. Must be between 1 and 30."
            )
        return self._search(year, month, day)

    @override
    def month_length(self, year: int, month: int) -> int:
        self.check_month(month)
        key = (year, month)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        try:
            self.lunar_to_gregorian(year, month, 30)
            length = 30
        except ConversionFailure:
            # Raises again if the month itself is outside the host's tables
            self.lunar_to_gregorian(year, month, 29)
            length = 29

        if self.cache is not None:
            self.cache.put(key, length)
        return length

    def _search(self, year: int, month: int, day: int) -> date:
        """Locate the Gregorian day whose Umm al-Qura date is (year, month, day).

        Phase one binary-searches a window around an estimate built from mean
        year and month lengths; phase two scans the same window linearly.
        Window days outside the host tables count as before the target when
        they precede the estimate and as after it otherwise.
        """
        target = (year, month, day)
        estimate = HIJRI_EPOCH_ORDINAL + int(
            (year - 1) * MEAN_YEAR_DAYS + (month - 1) * MEAN_MONTH_DAYS + day - 1
        )
        first = max(1, estimate - SEARCH_WINDOW)
        last = estimate + SEARCH_WINDOW

        low, high = first, last
        while low <= high:
            mid = (low + high) // 2
            found = self._probe(mid)
            if found == target:
                return date.fromordinal(mid)
            if (mid < estimate) if found is None else (found < target):
                low = mid + 1
            else:
                high = mid - 1

        for ordinal in range(first, last + 1):
            if self._probe(ordinal) == target:
                return date.fromordinal(ordinal)

        raise ConversionFailure(
            f"No Gregorian date matches Hijri {year:04d}-{month:02d}-{day:02d} "
            f"in the Umm al-Qura calendar"
        )

    def _probe(self, ordinal: int) -> LunarTriple | None:
        try:
            return self.gregorian_to_lunar(date.fromordinal(ordinal))
        except ConversionFailure:
            return None
