"""Exception types raised by hijri_rrule.

Every error derives from ``ValueError`` so callers that already guard date and
rule construction with ``except ValueError`` keep working.
"""


class HijriError(ValueError):
    """Base class for all hijri_rrule errors."""


class InvalidInput(HijriError):
    """A structural or range violation in date components or options."""


class InvalidRule(InvalidInput):
    """Rule options (or RRULE text) failed validation."""


class InvalidDate(HijriError):
    """A well-typed (year, month, day) that does not exist in the calendar."""


class OutOfRange(HijriError):
    """A date or day index outside the calendar's supported range."""


class ConversionFailure(HijriError):
    """The observational calendar could not resolve a date."""
