"""Tests for RRULE text parsing and serialization."""

import pytest
from dateutil.rrule import FR, MONTHLY, YEARLY

from hijri_rrule import HijriRRule
from hijri_rrule.date import LunarDate
from hijri_rrule.errors import InvalidRule
from hijri_rrule.options import normalize_options
from hijri_rrule.parser import parse_date_property, parse_string
from hijri_rrule.serializer import options_to_string, rrule_to_string


def test_parse_bare_rule():
    """Test a bare FREQ line without prefix."""
    opts = parse_string("FREQ=YEARLY;BYMONTH=9;BYMONTHDAY=1;COUNT=5")
    assert opts == {"freq": YEARLY, "bymonth": [9], "bymonthday": [1], "count": 5}


def test_parse_with_dtstart_and_calendar():
    """Test a DTSTART line with a CALENDAR parameter."""
    opts = parse_string(
        "DTSTART;CALENDAR=HIJRI-UM-AL-QURA:14460901\nRRULE:FREQ=MONTHLY;INTERVAL=2"
    )
    assert opts["calendar"] == "islamic-umalqura"
    assert opts["dtstart"] == LunarDate(1446, 9, 1)
    assert opts["freq"] == MONTHLY
    assert opts["interval"] == 2


def test_parse_plain_hijri_calendar_uses_default():
    """Test CALENDAR=HIJRI leaves the calendar to configuration."""
    opts = parse_string("DTSTART;CALENDAR=HIJRI:14460901T083000Z\nRRULE:FREQ=DAILY")
    assert "calendar" not in opts
    assert opts["dtstart"].hour == 8 and opts["dtstart"].minute == 30


def test_parse_all_parts():
    """Test every supported rule part."""
    opts = parse_string(
        "RRULE:FREQ=WEEKLY;WKST=MO;UNTIL=14470101;BYSETPOS=1,-1;BYYEARDAY=10;"
        "BYWEEKNO=3;BYDAY=MO,-1FR;BYHOUR=9;BYMINUTE=30;BYSECOND=0;"
        "TZID=Asia/Riyadh;SKIP=BACKWARD"
    )
    assert opts["wkst"] == 0
    assert opts["until"] == LunarDate(1447, 1, 1)
    assert opts["bysetpos"] == [1, -1]
    assert opts["byweekday"][1] == FR(-1)
    assert opts["tzid"] == "Asia/Riyadh"
    assert opts["skip"] == "backward"
    assert (opts["byhour"], opts["byminute"], opts["bysecond"]) == ([9], [30], [0])


@pytest.mark.parametrize(
    "text, message",
    [
        ("FREQ=FORTNIGHTLY", "FREQ"),
        ("FREQ=DAILY;WKST=XX", "WKST"),
        ("FREQ=DAILY;BYDAY=1XX", "BYDAY"),
        ("FREQ=DAILY;BYMONTH=a,b", "BYMONTH"),
        ("FREQ=DAILY;COLOR=RED", "Unknown RRULE part"),
        ("RRULE:COUNT=3", "FREQ is required"),
        ("DTSTART:14460901", "No RRULE"),
        ("FREQ=DAILY;SKIP=SIDEWAYS", "SKIP"),
        ("DTSTART;CALENDAR=JULIAN:14460901\nFREQ=DAILY", "calendar"),
        ("DTSTART:1446-09-01\nFREQ=DAILY", "DTSTART"),
    ],
)
def test_parse_errors(text, message):
    """Test malformed text raises InvalidRule naming the problem."""
    with pytest.raises(InvalidRule, match=message):
        parse_string(text)


def test_parse_date_property_lists():
    """Test comma-separated RDATE values."""
    dates, calendar, tzid = parse_date_property("RDATE;CALENDAR=HIJRI-TABULAR:14460901,14460915")
    assert dates == [LunarDate(1446, 9, 1), LunarDate(1446, 9, 15)]
    assert calendar == "islamic-tbla"
    assert tzid is None


def test_serialize_rule():
    """Test DTSTART and RRULE lines."""
    opts = normalize_options(
        YEARLY, bymonth=9, bymonthday=1, count=5, dtstart=(1446, 9, 1)
    )
    assert options_to_string(opts) == (
        "DTSTART;CALENDAR=HIJRI-TABULAR:14460901\n"
        "RRULE:FREQ=YEARLY;COUNT=5;BYMONTH=9;BYMONTHDAY=1"
    )
    assert options_to_string(opts, include_dtstart=False) == rrule_to_string(opts)


def test_serialize_umalqura_and_optional_parts():
    """Test calendar token, interval, weekdays, until and skip."""
    opts = normalize_options(
        MONTHLY,
        interval=2,
        wkst="MO",
        until=(1447, 1, 1),
        bymonthday=[1, -1],
        byweekday=["FR", "-1FR"],
        skip="forward",
        dtstart=(1446, 9, 1),
        calendar="islamic-umalqura",
    )
    assert options_to_string(opts) == (
        "DTSTART;CALENDAR=HIJRI-UM-AL-QURA:14460901\n"
        "RRULE:FREQ=MONTHLY;INTERVAL=2;WKST=MO;UNTIL=14470101;"
        "BYMONTHDAY=1,-1;BYDAY=FR,-1FR;SKIP=FORWARD"
    )


def test_rule_text_round_trip():
    """Test a rule survives str() and from_string()."""
    rule = HijriRRule(
        MONTHLY,
        bymonthday=30,
        skip="backward",
        count=6,
        interval=2,
        dtstart=LunarDate(1446, 1, 30, 9, 0, 0),
    )
    again = HijriRRule.from_string(str(rule))
    assert again == rule
    assert again.all() == rule.all()
