"""Tests for rule sets and multi-line RRULE text."""

from datetime import date

import pytest
from dateutil.rrule import DAILY, FR, MONTHLY, WEEKLY, YEARLY

from hijri_rrule import HijriRRule, HijriRRuleSet, rulestr
from hijri_rrule.date import LunarDate
from hijri_rrule.errors import InvalidRule


def ymd(dates):
    return [(d.year, d.month, d.day) for d in dates]


def test_rdate_and_exdate():
    """Test extra dates are merged in and excluded dates removed."""
    rset = HijriRRuleSet()
    rset.rrule(HijriRRule(MONTHLY, bymonthday=1, count=3, dtstart=(1446, 1, 1)))
    rset.exdate((1446, 2, 1))
    rset.rdate((1446, 1, 15))
    assert ymd(rset) == [(1446, 1, 1), (1446, 1, 15), (1446, 3, 1)]


def test_overlapping_sources_appear_once():
    """Test dates produced by several sources are not repeated."""
    rset = HijriRRuleSet()
    rset.rrule(HijriRRule(MONTHLY, bymonthday=1, count=3, dtstart=(1446, 1, 1)))
    rset.rrule(HijriRRule(MONTHLY, bymonthday=[1, 15], count=4, dtstart=(1446, 1, 1)))
    rset.rdate((1446, 1, 1))
    assert ymd(rset) == [
        (1446, 1, 1),
        (1446, 1, 15),
        (1446, 2, 1),
        (1446, 2, 15),
        (1446, 3, 1),
    ]


def test_exrule_removes_matches():
    """Test EXRULE occurrences are excluded."""
    rset = HijriRRuleSet()
    rset.rrule(HijriRRule(DAILY, count=10, dtstart=(1446, 9, 1)))
    rset.exrule(HijriRRule(WEEKLY, byweekday=FR, count=2, dtstart=(1446, 9, 1)))
    days = [d for _, _, d in ymd(rset)]
    assert days == [1, 2, 3, 4, 5, 6, 8, 9, 10]


def test_unbounded_rule_with_exclusions():
    """Test sets stay lazy over unbounded rules."""
    rset = HijriRRuleSet()
    rset.rrule(HijriRRule(YEARLY, bymonth=9, bymonthday=1, dtstart=(1446, 9, 1)))
    rset.exdate((1447, 9, 1))
    assert ymd(rset.all(limit=2)) == [(1446, 9, 1), (1448, 9, 1)]


def test_cache_is_cleared_on_change():
    """Test adding a source invalidates cached results."""
    rset = HijriRRuleSet()
    rset.rrule(HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=2, dtstart=(1446, 9, 1)))
    assert len(rset.all()) == 2
    rset.rdate((1446, 10, 1))
    assert len(rset.all()) == 3


def test_set_queries_and_gregorian_views():
    """Test query methods work on sets."""
    rset = HijriRRuleSet()
    rset.rrule(HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=3, dtstart=(1446, 9, 1)))
    assert rset.after((1446, 9, 1)) == LunarDate(1447, 9, 1)
    assert rset.before((1446, 9, 1), inclusive=True) == LunarDate(1446, 9, 1)
    assert ymd(rset.between((1446, 1, 1), (1448, 1, 1))) == [(1446, 9, 1), (1447, 9, 1)]
    assert rset.all_gregorian()[0] == date(2025, 3, 1)


def test_accessors_return_copies():
    """Test accessors expose the sources without sharing the lists."""
    rset = HijriRRuleSet()
    rset.rdate((1446, 1, 1))
    rset.rdates().clear()
    assert rset.rdates() == [LunarDate(1446, 1, 1)]
    assert rset.rrules() == [] and rset.exrules() == [] and rset.exdates() == []


def test_clone_is_independent():
    """Test a clone does not see later changes."""
    rset = HijriRRuleSet()
    rset.rdate((1446, 1, 1))
    copy = rset.clone()
    rset.rdate((1446, 2, 1))
    assert len(copy.rdates()) == 1


def test_set_to_string():
    """Test sets serialize as RRULE, RDATE, EXRULE and EXDATE lines."""
    rset = HijriRRuleSet()
    rset.rrule(HijriRRule(YEARLY, bymonth=9, bymonthday=1, count=2, dtstart=(1446, 9, 1)))
    rset.rdate((1446, 10, 1))
    rset.exrule(HijriRRule(MONTHLY, bymonthday=15, dtstart=(1446, 1, 1)))
    rset.exdate((1447, 9, 1))
    assert str(rset).splitlines() == [
        "DTSTART;CALENDAR=HIJRI-TABULAR:14460901",
        "RRULE:FREQ=YEARLY;COUNT=2;BYMONTH=9;BYMONTHDAY=1",
        "RDATE;CALENDAR=HIJRI:14461001",
        "EXRULE:FREQ=MONTHLY;BYMONTHDAY=15",
        "EXDATE;CALENDAR=HIJRI:14470901",
    ]


def test_rulestr_single_rule():
    """Test a lone RRULE parses to a HijriRRule."""
    rule = rulestr("DTSTART:14460901\nRRULE:FREQ=YEARLY;BYMONTH=9;BYMONTHDAY=1;COUNT=2")
    assert isinstance(rule, HijriRRule)
    assert ymd(rule) == [(1446, 9, 1), (1447, 9, 1)]


def test_rulestr_builds_set():
    """Test RDATE and EXDATE lines produce a rule set."""
    rset = rulestr(
        "DTSTART:14460101\n"
        "RRULE:FREQ=MONTHLY;BYMONTHDAY=1;COUNT=2\n"
        "RDATE:14460115\n"
        "EXDATE:14460201\n"
        "X-NOTE:ignored"
    )
    assert isinstance(rset, HijriRRuleSet)
    assert ymd(rset) == [(1446, 1, 1), (1446, 1, 15)]


def test_rulestr_forceset_and_dtstart_override():
    """Test forceset and an explicit dtstart."""
    rset = rulestr("FREQ=DAILY;COUNT=2", forceset=True, dtstart=(1446, 9, 29))
    assert isinstance(rset, HijriRRuleSet)
    assert ymd(rset) == [(1446, 9, 29), (1446, 9, 30)]


def test_rulestr_calendar_and_tzid():
    """Test the DTSTART calendar and tzid reach the rule."""
    rule = rulestr(
        "DTSTART;CALENDAR=HIJRI-UM-AL-QURA:14460901\nRRULE:FREQ=DAILY;COUNT=1",
        tzid="Asia/Riyadh",
    )
    assert rule.options.calendar == "islamic-umalqura"
    assert rule.options.tzid == "Asia/Riyadh"


def test_rulestr_unfold():
    """Test folded lines are joined when unfold is set."""
    rule = rulestr("RRULE:FREQ=MONTHLY;BYMON\n THDAY=1;COUNT=2", unfold=True, dtstart=(1446, 1, 1))
    assert ymd(rule) == [(1446, 1, 1), (1446, 2, 1)]


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "Empty"),
        ("BEGIN:VEVENT\nRRULE:FREQ=DAILY", "Unsupported property"),
        ("DTSTART:14460101\nRDATE:soon", "Invalid RDATE"),
        ("DTSTART:14460101", "No RRULE"),
    ],
)
def test_rulestr_errors(text, message):
    """Test malformed text raises InvalidRule."""
    with pytest.raises(InvalidRule, match=message):
        rulestr(text)
