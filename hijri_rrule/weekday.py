"""Weekday helpers built on dateutil's ``weekday`` objects.

Weekdays are numbered Monday=0 through Sunday=6. An ordinal may be attached
(``FR(+1)`` is the first Friday, ``FR(-1)`` the last) exactly as in
``dateutil.rrule``.
"""

import re
from typing import Any

from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, weekday

from hijri_rrule.errors import InvalidInput
from hijri_rrule.util import WEEKDAY_CODES, WEEKDAY_NAMES, Locale, format_ordinal

WEEKDAYS: tuple[weekday, ...] = (MO, TU, WE, TH, FR, SA, SU)

_BYDAY = re.compile(r"^([+-]?\d{1,2})?([A-Z]{2})$")

_ORDINALS: dict[Locale, dict[int, str]] = {
    "en": {
        1: "first",
        2: "second",
        3: "third",
        4: "fourth",
        5: "fifth",
        -1: "last",
        -2: "second last",
        -3: "third last",
    },
    "ar": {
        1: "الأول",
        2: "الثاني",
        3: "الثالث",
        4: "الرابع",
        5: "الخامس",
        -1: "الأخير",
        -2: "قبل الأخير",
    },
}


def parse_weekday(text: str) -> weekday:
    """Parse a BYDAY token such as "FR", "1FR" or "-1FR".

    Raises:
        InvalidInput: If the token is malformed or the ordinal is zero
    """
    match = _BYDAY.match(text.strip().upper())
    if not match or match.group(2) not in WEEKDAY_CODES:
        raise InvalidInput(
            f"Invalid weekday: {text!r}\n"
            f"Expected a two-letter code ({', '.join(WEEKDAY_CODES)}) "
            f"with an optional ordinal, e.g. FR or -1FR"
        )
    n = int(match.group(1)) if match.group(1) else None
    if n == 0:
        raise InvalidInput(f"Invalid weekday ordinal in {text!r}: must be non-zero")
    return weekday(WEEKDAY_CODES.index(match.group(2)), n)


def as_weekday(value: Any) -> weekday:
    """Coerce an int (0-6), string token or dateutil weekday to a weekday."""
    if isinstance(value, weekday):
        return value
    if isinstance(value, str):
        return parse_weekday(value)
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 6:
        return WEEKDAYS[value]
    raise InvalidInput(
        f"Invalid weekday: {value!r}\n"
        f"Use 0-6 (Monday=0), a code like 'FR', or a dateutil weekday like FR(-1)"
    )


def format_weekday(value: weekday) -> str:
    """RRULE form of a weekday: "FR", "1FR", "-1FR"."""
    code = WEEKDAY_CODES[value.weekday]
    return f"{value.n}{code}" if value.n else code


def ordinal_text(n: int, locale: Locale = "en") -> str:
    """Spelled-out ordinal used in rule descriptions ("first", "last", ...)."""
    table = _ORDINALS[locale]
    if n in table:
        return table[n]
    return format_ordinal(n) if locale == "en" else str(n)


def weekday_text(value: weekday, locale: Locale = "en") -> str:
    """Describe a weekday, e.g. "Friday" or "the first Friday"."""
    if locale not in WEEKDAY_NAMES:
        raise InvalidInput(f"Unsupported locale: {locale!r}. Supported locales: en, ar")
    name = WEEKDAY_NAMES[locale][value.weekday]
    if not value.n:
        return name
    if locale == "ar":
        return f"{name} {ordinal_text(value.n, locale)}"
    return f"the {ordinal_text(value.n, locale)} {name}"
