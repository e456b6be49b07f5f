from dateutil.rrule import (
    DAILY,
    FR,
    HOURLY,
    MINUTELY,
    MO,
    MONTHLY,
    SA,
    SECONDLY,
    SU,
    TH,
    TU,
    WE,
    WEEKLY,
    YEARLY,
)

from .calendars import get_backend, reset_backends
from .config import CalendarConfig, get_config, reset_config, set_config
from .date import LunarDate, to_lunar_date
from .datemath import (
    add_days,
    add_months,
    add_years,
    diff_days,
    diff_months,
    diff_years,
    end_of_month,
    end_of_week,
    end_of_year,
    nth_weekday_of_month,
    start_of_month,
    start_of_week,
    start_of_year,
    week_of_year,
)
from .errors import (
    ConversionFailure,
    HijriError,
    InvalidDate,
    InvalidInput,
    InvalidRule,
    OutOfRange,
)
from .nlp import to_text
from .options import RuleOptions, Skip, normalize_options
from .parser import parse_string
from .rrule import HijriRRule
from .ruleset import HijriRRuleSet, rulestr
from .serializer import options_to_string, rrule_to_string

__all__ = [
    "YEARLY",
    "MONTHLY",
    "WEEKLY",
    "DAILY",
    "HOURLY",
    "MINUTELY",
    "SECONDLY",
    "MO",
    "TU",
    "WE",
    "TH",
    "FR",
    "SA",
    "SU",
    "HijriRRule",
    "HijriRRuleSet",
    "rulestr",
    "LunarDate",
    "to_lunar_date",
    "RuleOptions",
    "Skip",
    "normalize_options",
    "parse_string",
    "options_to_string",
    "rrule_to_string",
    "to_text",
    "CalendarConfig",
    "get_config",
    "set_config",
    "reset_config",
    "get_backend",
    "reset_backends",
    "add_days",
    "add_months",
    "add_years",
    "diff_days",
    "diff_months",
    "diff_years",
    "nth_weekday_of_month",
    "start_of_month",
    "end_of_month",
    "start_of_year",
    "end_of_year",
    "start_of_week",
    "end_of_week",
    "week_of_year",
    "HijriError",
    "InvalidInput",
    "InvalidRule",
    "InvalidDate",
    "OutOfRange",
    "ConversionFailure",
]
