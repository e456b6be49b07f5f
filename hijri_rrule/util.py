"""Calendar constants and small helpers for hijri_rrule.

Day counts describe the tabular (arithmetical) Hijri calendar. Name tables
are indexed the way Python numbers things: months 1-12 (index 0 unused) and
weekdays Monday=0 through Sunday=6, matching ``datetime.date.weekday()`` and
dateutil's ``weekday`` objects.
"""

from itertools import accumulate
from typing import Literal, TypeAlias

Locale: TypeAlias = Literal["en", "ar"]

# Julian Day of 1 Muharram 1 AH at midnight (civil epoch, 622-07-19 Gregorian)
HIJRI_EPOCH_JD = 1948439.5

# Gregorian ordinal (date.toordinal) of the same day
HIJRI_EPOCH_ORDINAL = 227015

LUNAR_CYCLE_YEARS = 30
LUNAR_CYCLE_DAYS = 10631
LEAP_YEARS_IN_CYCLE = (2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29)

COMMON_YEAR_DAYS = 354
LEAP_YEAR_DAYS = 355

# Tabular month lengths; month 12 gains a day in leap years
MONTH_DAYS = (30, 29, 30, 29, 30, 29, 30, 29, 30, 29, 30, 29)

# Days elapsed before each month in a common tabular year
DAYS_BEFORE_MONTH = tuple(accumulate(MONTH_DAYS[:-1], initial=0))

# Observed averages used to seed conversion searches
MEAN_YEAR_DAYS = 354.36667
MEAN_MONTH_DAYS = 29.530589

MIN_MONTH = 1
MAX_MONTH = 12

MONTH_NAMES: dict[Locale, tuple[str, ...]] = {
    "en": (
        "",
        "Muharram",
        "Safar",
        "Rabi' al-Awwal",
        "Rabi' al-Thani",
        "Jumada al-Awwal",
        "Jumada al-Thani",
        "Rajab",
        "Sha'ban",
        "Ramadan",
        "Shawwal",
        "Dhu al-Qa'dah",
        "Dhu al-Hijjah",
    ),
    "ar": (
        "",
        "مُحَرَّم",
        "صَفَر",
        "رَبِيع الأَوَّل",
        "رَبِيع الثَّانِي",
        "جُمَادَى الأُولَى",
        "جُمَادَى الآخِرَة",
        "رَجَب",
        "شَعْبَان",
        "رَمَضَان",
        "شَوَّال",
        "ذُو القَعْدَة",
        "ذُو الحِجَّة",
    ),
}

MONTH_NAMES_SHORT = (
    "",
    "Muh",
    "Saf",
    "Rb1",
    "Rb2",
    "Jm1",
    "Jm2",
    "Raj",
    "Sha",
    "Ram",
    "Shw",
    "Qad",
    "Hij",
)

WEEKDAY_NAMES: dict[Locale, tuple[str, ...]] = {
    "en": (
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
        "Sunday",
    ),
    "ar": (
        "الإثنين",
        "الثلاثاء",
        "الأربعاء",
        "الخميس",
        "الجمعة",
        "السبت",
        "الأحد",
    ),
}

WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

# Month constants
MUHARRAM = 1
SAFAR = 2
RABI_AL_AWWAL = 3
RABI_AL_THANI = 4
JUMADA_AL_AWWAL = 5
JUMADA_AL_THANI = 6
RAJAB = 7
SHABAN = 8
RAMADAN = 9
SHAWWAL = 10
DHU_AL_QADAH = 11
DHU_AL_HIJJAH = 12


def ordinal_suffix(n: int) -> str:
    """Return the English ordinal suffix for n ("st", "nd", "rd" or "th")."""
    if 11 <= abs(n) % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(abs(n) % 10, "th")


def format_ordinal(n: int) -> str:
    """Format n as an English ordinal, e.g. 1 -> "1st", 22 -> "22nd"."""
    return f"{n}{ordinal_suffix(n)}"


def is_tabular_leap_year(year: int) -> bool:
    """Leap status of a year in the 30-year tabular cycle."""
    return ((year - 1) % LUNAR_CYCLE_YEARS) + 1 in LEAP_YEARS_IN_CYCLE
