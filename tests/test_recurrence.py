"""Tests for recurrence generation and the HijriRRule query API."""

import logging
from datetime import date

from dateutil.rrule import DAILY, FR, HOURLY, MO, MONTHLY, SA, WEEKLY, YEARLY

from hijri_rrule import HijriRRule
from hijri_rrule.calendars import get_backend
from hijri_rrule.date import LunarDate
from hijri_rrule.iterator import apply_bysetpos, iterate, period_limit, resolve_day
from hijri_rrule.options import Skip, normalize_options


def ymd(dates):
    return [(d.year, d.month, d.day) for d in dates]


def test_yearly_ramadan():
    """Test the first of Ramadan for five years."""
    rule = HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=5, dtstart=(1446, 9, 1))
    assert ymd(rule) == [
        (1446, 9, 1),
        (1447, 9, 1),
        (1448, 9, 1),
        (1449, 9, 1),
        (1450, 9, 1),
    ]


def test_monthly_day_30_omit():
    """Test OMIT skips 29-day months."""
    rule = HijriRRule(MONTHLY, bymonthday=30, count=3, dtstart=(1446, 1, 30), skip="omit")
    assert ymd(rule) == [(1446, 1, 30), (1446, 3, 30), (1446, 5, 30)]


def test_monthly_day_30_backward():
    """Test BACKWARD substitutes the month's last day."""
    rule = HijriRRule(MONTHLY, bymonthday=30, count=3, dtstart=(1446, 1, 30), skip="backward")
    assert ymd(rule) == [(1446, 1, 30), (1446, 2, 29), (1446, 3, 30)]


def test_monthly_day_30_forward():
    """Test FORWARD substitutes the first day of the next month."""
    rule = HijriRRule(MONTHLY, bymonthday=30, count=3, dtstart=(1446, 1, 30), skip=Skip.FORWARD)
    assert ymd(rule) == [(1446, 1, 30), (1446, 3, 1), (1446, 3, 30)]


def test_between_exclusive_and_inclusive():
    """Test between honors the inclusive flag at both ends."""
    rule = HijriRRule(MONTHLY, bymonthday=1, dtstart=(1446, 1, 1))
    assert ymd(rule.between((1446, 3, 1), (1446, 6, 1))) == [(1446, 4, 1), (1446, 5, 1)]
    assert ymd(rule.between((1446, 3, 1), (1446, 6, 1), inclusive=True)) == [
        (1446, 3, 1),
        (1446, 4, 1),
        (1446, 5, 1),
        (1446, 6, 1),
    ]


def test_after_and_before():
    """Test nearest occurrences around a date."""
    rule = HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=5, dtstart=(1446, 9, 1))
    assert rule.after((1446, 9, 2)) == LunarDate(1447, 9, 1)
    assert rule.after((1446, 9, 1)) == LunarDate(1447, 9, 1)
    assert rule.after((1446, 9, 1), inclusive=True) == LunarDate(1446, 9, 1)
    assert rule.before((1448, 1, 1)) == LunarDate(1447, 9, 1)
    assert rule.before((1446, 9, 1)) is None
    assert rule.after((1460, 1, 1)) is None


def test_gregorian_views():
    """Test Gregorian variants return datetime.date values."""
    rule = HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=2, dtstart=(1446, 9, 1))
    assert rule.all_gregorian()[0] == date(2025, 3, 1)
    assert next(rule.iter_gregorian()) == date(2025, 3, 1)
    assert rule.after_gregorian(date(2025, 3, 2)) == LunarDate(1447, 9, 1).to_gregorian()
    assert rule.before_gregorian((1446, 9, 1)) is None


def test_query_accepts_gregorian_dates():
    """Test query bounds may be Gregorian dates."""
    rule = HijriRRule(MONTHLY, bymonthday=1, count=12, dtstart=(1446, 1, 1))
    assert rule.after(date(2025, 3, 1), inclusive=True) == LunarDate(1446, 9, 1)


def test_last_friday_of_ramadan():
    """Test nth weekday rules."""
    rule = HijriRRule(YEARLY, bymonth=9, byweekday=FR(-1), count=1, dtstart=(1446, 1, 1))
    assert ymd(rule) == [(1446, 9, 28)]


def test_yearly_plain_weekday_in_month():
    """Test plain weekdays expand to every match in the month."""
    rule = HijriRRule(YEARLY, bymonth=9, byweekday=FR, count=5, dtstart=(1446, 1, 1))
    assert ymd(rule) == [(1446, 9, 7), (1446, 9, 14), (1446, 9, 21), (1446, 9, 28), (1447, 9, 3)]


def test_monthly_last_day():
    """Test negative month days count from the end."""
    rule = HijriRRule(MONTHLY, bymonthday=-1, count=3, dtstart=(1446, 1, 1))
    assert ymd(rule) == [(1446, 1, 30), (1446, 2, 29), (1446, 3, 30)]


def test_bysetpos_picks_last_weekday():
    """Test BYSETPOS selects within each period."""
    rule = HijriRRule(
        MONTHLY, byweekday=[MO, FR], bysetpos=-1, count=2, dtstart=(1446, 9, 1)
    )
    assert ymd(rule) == [(1446, 9, 28), (1446, 10, 29)]


def test_apply_bysetpos():
    """Test positive, negative and out-of-range positions."""
    days = [(1446, 1, d) for d in (3, 10, 17, 24)]
    assert apply_bysetpos(days, (1, -1)) == [(1446, 1, 3), (1446, 1, 24)]
    assert apply_bysetpos(days, (5, -5)) == []


def test_yearly_byyearday():
    """Test day-of-year selection, including from the end."""
    rule = HijriRRule(YEARLY, byyearday=[237, -1], count=2, dtstart=(1446, 1, 1))
    assert ymd(rule) == [(1446, 9, 1), (1446, 12, 29)]


def test_weekly_byweekday():
    """Test weekly rules expand within each seven-day period."""
    rule = HijriRRule(WEEKLY, byweekday=[FR, SA], count=4, dtstart=(1446, 9, 1))
    assert ymd(rule) == [(1446, 9, 1), (1446, 9, 7), (1446, 9, 8), (1446, 9, 14)]


def test_weekly_interval():
    """Test a fortnightly rule without BY-parts repeats dtstart's weekday."""
    rule = HijriRRule(WEEKLY, interval=2, count=3, dtstart=(1446, 9, 1))
    assert ymd(rule) == [(1446, 9, 1), (1446, 9, 15), (1446, 9, 29)]


def test_daily_with_filters():
    """Test daily rules filtered by month and weekday."""
    rule = HijriRRule(DAILY, bymonth=9, byweekday=FR, dtstart=(1446, 8, 1), count=4)
    assert ymd(rule) == [(1446, 9, 7), (1446, 9, 14), (1446, 9, 21), (1446, 9, 28)]


def test_daily_until_is_inclusive():
    """Test UNTIL includes its own date and stops after it."""
    rule = HijriRRule(DAILY, dtstart=(1446, 9, 28), until=(1446, 10, 1))
    assert ymd(rule) == [(1446, 9, 28), (1446, 9, 29), (1446, 9, 30), (1446, 10, 1)]


def test_sub_daily_walks_days():
    """Test sub-daily frequencies degrade to one occurrence per day."""
    rule = HijriRRule(HOURLY, count=3, dtstart=(1446, 9, 29))
    assert ymd(rule) == [(1446, 9, 29), (1446, 9, 30), (1446, 10, 1)]


def test_dtstart_time_is_carried():
    """Test occurrences keep dtstart's time of day."""
    rule = HijriRRule(DAILY, count=2, dtstart=LunarDate(1446, 9, 1, 19, 30))
    assert [(d.hour, d.minute) for d in rule] == [(19, 30), (19, 30)]


def test_candidates_before_dtstart_are_skipped():
    """Test the first period drops candidates before dtstart."""
    rule = HijriRRule(MONTHLY, bymonthday=[1, 15], count=3, dtstart=(1446, 1, 10))
    assert ymd(rule) == [(1446, 1, 15), (1446, 2, 1), (1446, 2, 15)]


def test_interval_does_not_drift_after_clamping():
    """Test month stepping is computed from dtstart, not the previous period."""
    rule = HijriRRule(MONTHLY, count=4, dtstart=(1446, 1, 30))
    assert ymd(rule) == [(1446, 1, 30), (1446, 2, 29), (1446, 3, 30), (1446, 4, 29)]


def test_output_is_strictly_increasing():
    """Test a busy rule never repeats or goes backward."""
    rule = HijriRRule(
        MONTHLY, bymonthday=[30, 29, 1], skip="forward", dtstart=(1446, 1, 1), count=40
    )
    values = ymd(rule)
    assert values == sorted(set(values))
    assert len(values) == 40


def test_count_zero_yields_nothing():
    """Test COUNT=0 produces no occurrences."""
    assert HijriRRule(DAILY, count=0, dtstart=(1446, 1, 1)).all() == []


def test_all_with_limit_and_callback():
    """Test limit and iterator callbacks stop materialization early."""
    rule = HijriRRule(DAILY, dtstart=(1446, 1, 1))
    assert len(rule.all(limit=5)) == 5
    seen = rule.all(iterator=lambda d, i: i < 3)
    assert ymd(seen) == [(1446, 1, 1), (1446, 1, 2), (1446, 1, 3)]


def test_results_are_cached():
    """Test repeated queries reuse cached results."""
    rule = HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=3, dtstart=(1446, 9, 1))
    first = rule.all()
    assert rule._cache.all is not None
    assert rule.all() == first
    assert rule.after((1446, 9, 1)) is rule.after((1446, 9, 1))


def test_uncached_rule():
    """Test caching can be disabled."""
    rule = HijriRRule(YEARLY, count=2, dtstart=(1446, 9, 1), cache=False)
    assert rule._cache is None
    assert len(rule.all()) == 2


def test_count_method():
    """Test count() returns COUNT or the materialized size."""
    assert HijriRRule(YEARLY, count=7, dtstart=(1446, 9, 1)).count() == 7
    bounded = HijriRRule(YEARLY, dtstart=(1446, 9, 1), until=(1449, 1, 1))
    assert bounded.count() == 3


def test_replace_and_equality():
    """Test replace builds a new rule and equality compares options."""
    rule = HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=3, dtstart=(1446, 9, 1))
    assert rule.replace(count=3) == rule
    longer = rule.replace(count=5)
    assert longer != rule
    assert longer.options.count == 5
    assert longer.options.bymonth == (9,)


def test_safety_bound_stops_unproductive_rules(caplog):
    """Test rules that never match stop after the period limit."""
    options = normalize_options(MONTHLY, bymonth=2, bymonthday=30, count=1, dtstart=(1446, 1, 1))
    assert period_limit(options) == 1000
    with caplog.at_level(logging.DEBUG, logger="hijri_rrule.iterator"):
        results = list(iterate(options))
    assert results == []
    assert "Stopped MONTHLY rule" in caplog.text


def test_resolve_day_policies():
    """Test missing-day resolution for each skip policy."""
    backend = get_backend("islamic-tbla")
    assert resolve_day(backend, 1446, 2, 30, Skip.OMIT) is None
    assert resolve_day(backend, 1446, 2, 30, Skip.BACKWARD) == (1446, 2, 29)
    assert resolve_day(backend, 1446, 2, 30, Skip.FORWARD) == (1446, 3, 1)
    assert resolve_day(backend, 1446, 12, 30, Skip.FORWARD) == (1447, 1, 1)
    assert resolve_day(backend, 1446, 1, 30, Skip.OMIT) == (1446, 1, 30)


def test_umalqura_rule():
    """Test rules evaluate on the Umm al-Qura calendar."""
    rule = HijriRRule(
        YEARLY, bymonth=9, bymonthday=1, count=2, dtstart=(1446, 9, 1), calendar="islamic-umalqura"
    )
    assert rule.all_gregorian()[0] == date(2025, 3, 1)
    assert all(d.calendar == "islamic-umalqura" for d in rule)
