"""Process-wide calendar configuration.

The configuration is a frozen dataclass; ``set_config`` swaps in a new value
rather than mutating the current one, so readers always see a consistent
snapshot.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Literal, TypeAlias, get_args

from hijri_rrule.errors import InvalidInput

CalendarVariant: TypeAlias = Literal["islamic-umalqura", "islamic-tbla"]

CALENDAR_VARIANTS: tuple[CalendarVariant, ...] = get_args(CalendarVariant)


@dataclass(frozen=True, kw_only=True)
class CalendarConfig:
    default_calendar: CalendarVariant = "islamic-umalqura"
    use_host_calendar: bool = True
    fallback_calendar: CalendarVariant = "islamic-tbla"
    cache_enabled: bool = True
    cache_max_size: int = 1000

    def __post_init__(self) -> None:
        for name in ("default_calendar", "fallback_calendar"):
            value = getattr(self, name)
            if value not in CALENDAR_VARIANTS:
                valid = ", ".join(CALENDAR_VARIANTS)
                raise InvalidInput(
                    f"Invalid {name}: {value!r}\n"
                    f"Valid calendars: {valid}\n"
                )
        if not isinstance(self.cache_max_size, int) or self.cache_max_size < 1:
            raise InvalidInput(
                f"cache_max_size must be a positive integer, got {self.cache_max_size!r}"
            )


_DEFAULT = CalendarConfig()
_current: CalendarConfig = _DEFAULT


def get_config() -> CalendarConfig:
    """Return the active calendar configuration."""
    return _current


def set_config(**changes: Any) -> CalendarConfig:
    """Merge changes into the active configuration and return the new value.

    Args:
        **changes: Any CalendarConfig field, e.g. ``default_calendar="islamic-tbla"``

    Returns:
        The configuration now in effect

    Raises:
        InvalidInput: If a field name is unknown or a value fails validation

    Examples:
        >>> _ = set_config(default_calendar="islamic-tbla")
        >>> get_config().default_calendar
        'islamic-tbla'
    """
    global _current

    known = {f.name for f in fields(CalendarConfig)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise InvalidInput(
            f"Unknown configuration option(s): {', '.join(unknown)}\n"
            f"Valid options: {', '.join(sorted(known))}\n"
        )

    _current = replace(_current, **changes)
    return _current


def reset_config() -> CalendarConfig:
    """Restore the default configuration."""
    global _current
    _current = _DEFAULT
    return _current
