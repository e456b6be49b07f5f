"""Render rule options as RFC 5545 style RRULE text."""

from dateutil.rrule import FREQNAMES

from hijri_rrule.config import CalendarVariant
from hijri_rrule.datemath import DEFAULT_WEEK_START
from hijri_rrule.options import RuleOptions, Skip
from hijri_rrule.util import WEEKDAY_CODES
from hijri_rrule.weekday import format_weekday

CALENDAR_PARAMS: dict[CalendarVariant, str] = {
    "islamic-umalqura": "HIJRI-UM-AL-QURA",
    "islamic-tbla": "HIJRI-TABULAR",
}


def _join(values: tuple[int, ...] | None) -> str | None:
    return ",".join(str(v) for v in values) if values else None


def rrule_properties(options: RuleOptions) -> str:
    """The ``NAME=value;...`` body of the RRULE line."""
    parts = [f"FREQ={FREQNAMES[options.freq]}"]

    if options.interval != 1:
        parts.append(f"INTERVAL={options.interval}")
    if options.wkst != DEFAULT_WEEK_START:
        parts.append(f"WKST={WEEKDAY_CODES[options.wkst]}")
    if options.count is not None:
        parts.append(f"COUNT={options.count}")
    if options.until is not None:
        parts.append(f"UNTIL={options.until.to_rrule_string()}")

    monthdays = (options.bymonthday or ()) + (options.bynmonthday or ())
    weekdays = (options.byweekday or ()) + (options.bynweekday or ())
    for name, value in (
        ("BYSETPOS", _join(options.bysetpos)),
        ("BYMONTH", _join(options.bymonth)),
        ("BYMONTHDAY", _join(monthdays)),
        ("BYYEARDAY", _join(options.byyearday)),
        ("BYWEEKNO", _join(options.byweekno)),
        ("BYDAY", ",".join(format_weekday(wd) for wd in weekdays) or None),
        ("BYHOUR", _join(options.byhour)),
        ("BYMINUTE", _join(options.byminute)),
        ("BYSECOND", _join(options.bysecond)),
        ("TZID", options.tzid),
    ):
        if value:
            parts.append(f"{name}={value}")

    if options.skip is not Skip.OMIT:
        parts.append(f"SKIP={options.skip.value.upper()}")

    return ";".join(parts)


def dtstart_line(options: RuleOptions) -> str:
    param = CALENDAR_PARAMS[options.calendar]
    return f"DTSTART;CALENDAR={param}:{options.dtstart.to_rrule_string()}"


def rrule_to_string(options: RuleOptions) -> str:
    """Only the ``RRULE:`` line, without DTSTART."""
    return f"RRULE:{rrule_properties(options)}"


def options_to_string(options: RuleOptions, include_dtstart: bool = True) -> str:
    """Serialize options as a DTSTART line (optional) followed by the RRULE line.

    Examples:
        >>> from hijri_rrule.options import normalize_options
        >>> opts = normalize_options("monthly", bymonthday=30, skip="backward",
        ...                          dtstart=(1446, 1, 30), calendar="islamic-tbla")
        >>> print(options_to_string(opts))
        DTSTART;CALENDAR=HIJRI-TABULAR:14460130
        RRULE:FREQ=MONTHLY;BYMONTHDAY=30;SKIP=BACKWARD
    """
    lines = [dtstart_line(options)] if include_dtstart else []
    lines.append(rrule_to_string(options))
    return "\n".join(lines)
