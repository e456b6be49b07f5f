"""Parse RRULE text into sparse rule options.

The accepted grammar is RFC 5545's RRULE property with two Hijri twists:
dates are Hijri ``YYYYMMDD[THHMMSS]`` values, and a ``CALENDAR`` parameter on
DTSTART selects the calendar variant::

    DTSTART;CALENDAR=HIJRI-TABULAR:14460901
    RRULE:FREQ=YEARLY;BYMONTH=9;BYMONTHDAY=1;COUNT=5
"""

from typing import Any

from dateutil.rrule import FREQNAMES

from hijri_rrule.config import CalendarVariant
from hijri_rrule.date import LunarDate
from hijri_rrule.errors import InvalidInput, InvalidRule
from hijri_rrule.util import WEEKDAY_CODES
from hijri_rrule.weekday import parse_weekday

CALENDAR_TOKENS: dict[str, CalendarVariant | None] = {
    "HIJRI-UM-AL-QURA": "islamic-umalqura",
    "HIJRI-TABULAR": "islamic-tbla",
    "HIJRI": None,
}

_SKIP_VALUES = ("omit", "forward", "backward")


class _PropertyParser:
    """Handlers for each RRULE part, dispatched by name."""

    _freq_map = {name: value for value, name in enumerate(FREQNAMES)}

    def _handle_int(self, kwargs, name, value, **extra):
        kwargs[name.lower()] = int(value)

    def _handle_int_list(self, kwargs, name, value, **extra):
        kwargs[name.lower()] = [int(x) for x in value.split(",")]

    _handle_INTERVAL = _handle_int
    _handle_COUNT = _handle_int
    _handle_BYSETPOS = _handle_int_list
    _handle_BYMONTH = _handle_int_list
    _handle_BYMONTHDAY = _handle_int_list
    _handle_BYYEARDAY = _handle_int_list
    _handle_BYWEEKNO = _handle_int_list
    _handle_BYHOUR = _handle_int_list
    _handle_BYMINUTE = _handle_int_list
    _handle_BYSECOND = _handle_int_list

    def _handle_FREQ(self, kwargs, name, value, **extra):
        kwargs["freq"] = self._freq_map[value.upper()]

    def _handle_UNTIL(self, kwargs, name, value, calendar=None, **extra):
        kwargs["until"] = LunarDate.from_rrule_string(value, calendar)

    def _handle_WKST(self, kwargs, name, value, **extra):
        kwargs["wkst"] = WEEKDAY_CODES.index(value.upper())

    def _handle_BYWEEKDAY(self, kwargs, name, value, **extra):
        kwargs["byweekday"] = [parse_weekday(token) for token in value.split(",")]

    _handle_BYDAY = _handle_BYWEEKDAY

    def _handle_TZID(self, kwargs, name, value, **extra):
        kwargs["tzid"] = value

    def _handle_SKIP(self, kwargs, name, value, **extra):
        skip = value.lower()
        if skip not in _SKIP_VALUES:
            raise ValueError(skip)
        kwargs["skip"] = skip

    def parse(self, text: str, calendar: CalendarVariant | None = None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        for pair in text.split(";"):
            pair = pair.strip()
            if not pair:
                continue
            name, sep, value = pair.partition("=")
            name = name.strip().upper()
            if not sep:
                raise InvalidRule(f"Malformed RRULE part: {pair!r} (expected NAME=VALUE)")
            handler = getattr(self, f"_handle_{name}", None)
            if handler is None:
                raise InvalidRule(f"Unknown RRULE part: {name}")
            try:
                handler(kwargs, name, value.strip(), calendar=calendar)
            except (KeyError, ValueError) as exc:
                raise InvalidRule(f"Invalid {name}: {value!r}") from exc
        if "freq" not in kwargs:
            raise InvalidRule(
                "FREQ is required in RRULE.\n"
                "Example: RRULE:FREQ=YEARLY;BYMONTH=9;BYMONTHDAY=1"
            )
        return kwargs


_properties = _PropertyParser()


def _split_property(line: str) -> tuple[str, list[str], str]:
    head, sep, value = line.partition(":")
    if not sep:
        raise InvalidRule(f"Invalid property line: {line!r}")
    name, *params = head.split(";")
    return name.strip().upper(), [p.strip() for p in params], value.strip()


def parse_date_property(
    line: str, calendar: CalendarVariant | None = None
) -> tuple[list[LunarDate], CalendarVariant | None, str | None]:
    """Parse a DTSTART, RDATE or EXDATE line.

    Returns:
        (dates, calendar, tzid); calendar is None when the line does not pin
        one (plain ``CALENDAR=HIJRI`` or no parameter)

    Raises:
        InvalidRule: On unknown parameters or malformed date values
    """
    name, params, value = _split_property(line)
    tzid = None
    for param in params:
        key, _, arg = param.partition("=")
        key, arg = key.upper(), arg.strip()
        if key == "CALENDAR":
            if arg.upper() not in CALENDAR_TOKENS:
                raise InvalidRule(f"Unsupported {name} calendar: {arg!r}")
            calendar = CALENDAR_TOKENS[arg.upper()] or calendar
        elif key == "TZID":
            tzid = arg
        elif key != "VALUE":
            raise InvalidRule(f"Unsupported {name} parameter: {param!r}")

    try:
        dates = [
            LunarDate.from_rrule_string(text, calendar)
            for text in value.split(",")
            if text.strip()
        ]
    except InvalidInput as exc:
        raise InvalidRule(f"Invalid {name} value: {value!r}") from exc
    if not dates:
        raise InvalidRule(f"{name} line has no date: {line!r}")
    return dates, calendar, tzid


def parse_rrule_properties(
    text: str, calendar: CalendarVariant | None = None
) -> dict[str, Any]:
    """Parse ``FREQ=...;...`` (with or without an ``RRULE:``/``EXRULE:`` prefix)."""
    text = text.strip()
    if ":" in text:
        text = text.partition(":")[2]
    return _properties.parse(text, calendar)


def parse_string(text: str) -> dict[str, Any]:
    """Parse RRULE text into keyword arguments for ``HijriRRule``.

    Args:
        text: An ``RRULE:`` line or bare ``FREQ=...`` line, optionally
            preceded by a ``DTSTART`` line

    Returns:
        Sparse options; ``dtstart`` and ``calendar`` are present only when
        a DTSTART line supplies them

    Raises:
        InvalidRule: On unknown parts, bad values, or a missing rule line

    Examples:
        >>> opts = parse_string("DTSTART;CALENDAR=HIJRI-TABULAR:14460901\\n"
        ...                     "RRULE:FREQ=YEARLY;BYMONTH=9;BYMONTHDAY=1;COUNT=5")
        >>> opts["calendar"], str(opts["dtstart"]), opts["bymonth"]
        ('islamic-tbla', '1446-09-01', [9])
    """
    options: dict[str, Any] = {}
    rule_line = None
    calendar: CalendarVariant | None = None

    for line in (raw.strip() for raw in text.splitlines()):
        if not line:
            continue
        upper = line.upper()
        if upper.startswith("DTSTART"):
            dates, calendar, tzid = parse_date_property(line)
            options["dtstart"] = dates[0]
            if calendar is not None:
                options["calendar"] = calendar
            if tzid:
                options["tzid"] = tzid
        elif upper.startswith("RRULE") or "FREQ=" in upper:
            rule_line = line
        else:
            raise InvalidRule(f"Unsupported line in RRULE text: {line!r}")

    if rule_line is None:
        raise InvalidRule(
            "No RRULE found in text.\n"
            "Example: DTSTART:14460901\\nRRULE:FREQ=YEARLY;BYMONTH=9"
        )

    options.update(parse_rrule_properties(rule_line, calendar))
    return options
