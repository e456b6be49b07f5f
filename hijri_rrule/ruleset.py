"""Sets of Hijri recurrence rules with explicit inclusions and exclusions."""

import heapq
import logging
from collections.abc import Iterator
from typing import Any

from typing_extensions import override

from hijri_rrule.date import LunarDate, to_lunar_date
from hijri_rrule.errors import InvalidRule
from hijri_rrule.parser import parse_date_property, parse_rrule_properties
from hijri_rrule.rrule import HijriRRule, RecurrenceBase, RRuleCache
from hijri_rrule.serializer import rrule_properties

logger = logging.getLogger(__name__)


class HijriRRuleSet(RecurrenceBase):
    """Union of rules and extra dates, minus excluded rules and dates.

    Occurrences are merged lazily from every source in date order. A date
    produced by several sources appears once; a date matched by any EXRULE
    or EXDATE never appears.

    Examples:
        >>> rset = HijriRRuleSet()
        >>> rset.rrule(HijriRRule("monthly", bymonthday=1, count=3,
        ...                       dtstart=(1446, 1, 1), calendar="islamic-tbla"))
        >>> rset.exdate((1446, 2, 1))
        >>> rset.rdate((1446, 1, 15))
        >>> [str(d) for d in rset]
        ['1446-01-01', '1446-01-15', '1446-03-01']
    """

    def __init__(self, cache: bool = True):
        self._rrules: list[HijriRRule] = []
        self._rdates: list[LunarDate] = []
        self._exrules: list[HijriRRule] = []
        self._exdates: list[LunarDate] = []
        self._tzid: str | None = None
        self._cache = RRuleCache() if cache else None

    def rrule(self, rule: HijriRRule) -> None:
        """Include the occurrences of a rule."""
        self._rrules.append(rule)
        self._invalidate()

    def rdate(self, value: Any) -> None:
        """Include a single date (LunarDate, Gregorian date or tuple)."""
        self._rdates.append(to_lunar_date(value))
        self._invalidate()

    def exrule(self, rule: HijriRRule) -> None:
        """Exclude every occurrence of a rule."""
        self._exrules.append(rule)
        self._invalidate()

    def exdate(self, value: Any) -> None:
        """Exclude a single date."""
        self._exdates.append(to_lunar_date(value))
        self._invalidate()

    def tzid(self, value: str | None = None) -> str | None:
        """Get the set's time zone name, or set it when a value is given."""
        if value is not None:
            self._tzid = value
        return self._tzid

    def rrules(self) -> list[HijriRRule]:
        return list(self._rrules)

    def rdates(self) -> list[LunarDate]:
        return list(self._rdates)

    def exrules(self) -> list[HijriRRule]:
        return list(self._exrules)

    def exdates(self) -> list[LunarDate]:
        return list(self._exdates)

    @override
    def _iter(self) -> Iterator[LunarDate]:
        included = heapq.merge(*(iter(r) for r in self._rrules), sorted(self._rdates))
        excluded = heapq.merge(*(iter(r) for r in self._exrules), sorted(self._exdates))

        blocker = next(excluded, None)
        last_key = None
        for value in included:
            key = str(value)
            if key == last_key:
                continue
            last_key = key

            # Advance the exclusion stream up to the current date
            while blocker is not None and blocker < value:
                blocker = next(excluded, None)
            if blocker is not None and blocker == value:
                continue
            yield value

    def clone(self) -> "HijriRRuleSet":
        copy = HijriRRuleSet(cache=self._cache is not None)
        copy._rrules = list(self._rrules)
        copy._rdates = list(self._rdates)
        copy._exrules = list(self._exrules)
        copy._exdates = list(self._exdates)
        copy._tzid = self._tzid
        return copy

    def __str__(self) -> str:
        lines = [str(rule) for rule in self._rrules]
        lines += [f"RDATE;CALENDAR=HIJRI:{d.to_rrule_string()}" for d in self._rdates]
        lines += [f"EXRULE:{rrule_properties(rule.options)}" for rule in self._exrules]
        lines += [f"EXDATE;CALENDAR=HIJRI:{d.to_rrule_string()}" for d in self._exdates]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"HijriRRuleSet(rrules={len(self._rrules)}, rdates={len(self._rdates)}, "
            f"exrules={len(self._exrules)}, exdates={len(self._exdates)})"
        )


def _unfold(text: str) -> list[str]:
    lines: list[str] = []
    for raw in text.splitlines():
        if raw[:1] in (" ", "\t") and lines:
            lines[-1] += raw[1:]
        elif raw.strip():
            lines.append(raw.rstrip())
    return lines


def rulestr(
    text: str,
    *,
    cache: bool = False,
    dtstart: Any = None,
    unfold: bool = False,
    forceset: bool = False,
    tzid: str | None = None,
) -> HijriRRule | HijriRRuleSet:
    """Parse RRULE text into a rule, or a rule set when the text needs one.

    Args:
        text: DTSTART, RRULE, RDATE, EXRULE and EXDATE lines
        cache: Enable result caching on the returned object(s)
        dtstart: Overrides any DTSTART line in the text
        unfold: Join RFC 5545 folded lines (continuations begin with a space)
        forceset: Always return a HijriRRuleSet
        tzid: Time zone name applied to every parsed rule

    Returns:
        A HijriRRuleSet when ``forceset`` is set, when there is more than one
        RRULE, or when any RDATE, EXRULE or EXDATE line is present; otherwise
        a HijriRRule

    Raises:
        InvalidRule: On malformed lines or rule parts
    """
    if not text.strip():
        raise InvalidRule("Empty RRULE text")

    lines = _unfold(text) if unfold else [line for line in text.splitlines() if line.strip()]

    start: Any = None
    calendar = None
    rrule_lines: list[str] = []
    exrule_lines: list[str] = []
    rdate_lines: list[str] = []
    exdate_lines: list[str] = []

    for line in (raw.strip() for raw in lines):
        name = line.split(":", 1)[0].split(";", 1)[0].upper() if ":" in line else "RRULE"
        if name == "DTSTART":
            dates, calendar, _ = parse_date_property(line)
            start = dates[0]
        elif name == "RRULE":
            rrule_lines.append(line)
        elif name == "EXRULE":
            exrule_lines.append(line)
        elif name == "RDATE":
            rdate_lines.append(line)
        elif name == "EXDATE":
            exdate_lines.append(line)
        elif name.startswith("X-"):
            continue
        else:
            raise InvalidRule(f"Unsupported property: {name}")

    if dtstart is not None:
        start = dtstart

    def build(line: str) -> HijriRRule:
        kwargs = parse_rrule_properties(line, calendar)
        if start is not None:
            kwargs["dtstart"] = start
        if calendar is not None:
            kwargs["calendar"] = calendar
        if tzid:
            kwargs["tzid"] = tzid
        return HijriRRule(cache=cache, **kwargs)

    needs_set = forceset or len(rrule_lines) > 1 or rdate_lines or exrule_lines or exdate_lines
    if not needs_set:
        if not rrule_lines:
            raise InvalidRule("No RRULE found in text")
        logger.debug("rulestr: parsed a single rule")
        return build(rrule_lines[0])

    logger.debug(
        "rulestr: building a rule set from %d RRULE, %d RDATE, %d EXRULE, %d EXDATE lines",
        len(rrule_lines),
        len(rdate_lines),
        len(exrule_lines),
        len(exdate_lines),
    )
    rset = HijriRRuleSet(cache=cache)
    for line in rrule_lines:
        rset.rrule(build(line))
    for line in exrule_lines:
        rset.exrule(build(line))
    for line in rdate_lines:
        for value in parse_date_property(line, calendar)[0]:
            rset.rdate(value)
    for line in exdate_lines:
        for value in parse_date_property(line, calendar)[0]:
            rset.exdate(value)
    if tzid:
        rset.tzid(tzid)
    return rset
