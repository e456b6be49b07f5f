"""Human-readable descriptions of recurrence rules in English and Arabic."""

from dataclasses import dataclass

from dateutil.rrule import DAILY, HOURLY, MINUTELY, MONTHLY, SECONDLY, WEEKLY, YEARLY

from hijri_rrule.errors import InvalidInput
from hijri_rrule.options import RuleOptions
from hijri_rrule.util import MONTH_NAMES, Locale, format_ordinal
from hijri_rrule.weekday import ordinal_text, weekday_text


@dataclass(frozen=True)
class Vocabulary:
    every: str
    units: dict[int, tuple[str, str]]
    and_: str
    on: str
    in_: str
    for_: str
    time: str
    times: str
    until: str
    list_sep: str
    day_prefix: str


EN = Vocabulary(
    every="every",
    units={
        YEARLY: ("year", "years"),
        MONTHLY: ("month", "months"),
        WEEKLY: ("week", "weeks"),
        DAILY: ("day", "days"),
        HOURLY: ("hour", "hours"),
        MINUTELY: ("minute", "minutes"),
        SECONDLY: ("second", "seconds"),
    },
    and_="and",
    on="on",
    in_="in",
    for_="for",
    time="time",
    times="times",
    until="until",
    list_sep=", ",
    day_prefix="day",
)

AR = Vocabulary(
    every="كل",
    units={
        YEARLY: ("سنة", "سنوات"),
        MONTHLY: ("شهر", "أشهر"),
        WEEKLY: ("أسبوع", "أسابيع"),
        DAILY: ("يوم", "أيام"),
        HOURLY: ("ساعة", "ساعة"),
        MINUTELY: ("دقيقة", "دقيقة"),
        SECONDLY: ("ثانية", "ثانية"),
    },
    and_="و",
    on="في",
    in_="في",
    for_="لمدة",
    time="مرة",
    times="مرات",
    until="حتى",
    list_sep="، ",
    day_prefix="اليوم",
)

VOCABULARIES: dict[str, Vocabulary] = {"en": EN, "ar": AR}


def _join(items: list[str], words: Vocabulary) -> str:
    if len(items) == 1:
        return items[0]
    return f"{words.list_sep.join(items[:-1])} {words.and_} {items[-1]}"


def _frequency(options: RuleOptions, words: Vocabulary, locale: Locale) -> str:
    singular, plural = words.units[options.freq]
    if options.interval == 1:
        return f"{words.every} {singular}"
    if locale == "ar" and options.interval == 2:
        # Arabic dual
        return f"{words.every} {singular}ين"
    return f"{words.every} {options.interval} {plural}"


def _month_days(options: RuleOptions, words: Vocabulary, locale: Locale) -> str:
    days = (options.bymonthday or ()) + (options.bynmonthday or ())
    if locale == "ar":
        return f"{words.on} {words.day_prefix} {_join([str(d) for d in days], words)}"
    labels = [
        f"the {format_ordinal(d)}" if d > 0 else f"the {ordinal_text(d)} {words.day_prefix}"
        for d in days
    ]
    return f"{words.on} {_join(labels, words)}"


def _count(count: int, words: Vocabulary, locale: Locale) -> str:
    if locale == "ar":
        if count == 1:
            return f"{words.for_} {words.time} واحدة"
        if count == 2:
            return f"{words.for_} مرتين"
        return f"{words.for_} {count} {words.times}"
    return f"{words.for_} {count} {words.time if count == 1 else words.times}"


def to_text(options: RuleOptions, locale: Locale = "en") -> str:
    """Describe normalized rule options as a sentence fragment.

    Args:
        options: Normalized options (see ``normalize_options``)
        locale: "en" or "ar"

    Returns:
        Space-joined phrases: frequency, months, month days, weekdays,
        ordinal weekdays, count and until, each present only when set

    Raises:
        InvalidInput: If the locale is not supported

    Examples:
        >>> from hijri_rrule.options import normalize_options
        >>> opts = normalize_options("yearly", bymonth=9, bymonthday=1, count=5,
        ...                          dtstart=(1446, 9, 1), calendar="islamic-tbla")
        >>> to_text(opts)
        'every year in Ramadan on the 1st for 5 times'
    """
    words = VOCABULARIES.get(locale)
    if words is None:
        raise InvalidInput(
            f"Unsupported locale: {locale!r}. Supported locales: en, ar"
        )
    months = MONTH_NAMES[locale]

    parts = [_frequency(options, words, locale)]
    if options.bymonth:
        parts.append(f"{words.in_} {_join([months[m] for m in options.bymonth], words)}")
    if options.bymonthday or options.bynmonthday:
        parts.append(_month_days(options, words, locale))
    if options.byweekday:
        names = [weekday_text(wd, locale) for wd in options.byweekday]
        parts.append(f"{words.on} {_join(names, words)}")
    if options.bynweekday:
        names = [weekday_text(wd, locale) for wd in options.bynweekday]
        parts.append(f"{words.on} {_join(names, words)}")
    if options.count is not None:
        parts.append(_count(options.count, words, locale))
    if options.until is not None:
        until = options.until
        if locale == "ar":
            parts.append(f"{words.until} {until.day} {months[until.month]} {until.year}")
        else:
            parts.append(
                f"{words.until} {format_ordinal(until.day)} {months[until.month]} {until.year} AH"
            )
    return " ".join(parts)
