"""Calendar backends and the process-wide backend registry.

Each calendar variant is served by a single shared backend instance. The
observational (Umm al-Qura) backend depends on a host conversion library;
its availability is checked once, and if it is missing the registry logs a
warning and serves the configured fallback variant instead.
"""

import logging
import threading

from hijri_rrule.calendars.base import CalendarBackend, LunarTriple
from hijri_rrule.calendars.observational import (
    MonthLengthCache,
    ObservationalBackend,
    host_calendar_available,
)
from hijri_rrule.calendars.tabular import TabularBackend
from hijri_rrule.config import CALENDAR_VARIANTS, CalendarVariant, get_config
from hijri_rrule.errors import InvalidInput

logger = logging.getLogger(__name__)

_backends: dict[CalendarVariant, CalendarBackend] = {}
_host_available: bool | None = None
_lock = threading.Lock()


def _host_ok() -> bool:
    global _host_available
    if _host_available is None:
        _host_available = host_calendar_available()
        if not _host_available:
            logger.warning(
                "Umm al-Qura calendar is unavailable; falling back to %s",
                get_config().fallback_calendar,
            )
    return _host_available


def _resolve(variant: CalendarVariant) -> CalendarVariant:
    if variant != "islamic-umalqura":
        return variant
    config = get_config()
    if config.use_host_calendar and _host_ok():
        return variant
    if config.fallback_calendar == "islamic-umalqura":
        return "islamic-tbla"
    return config.fallback_calendar


def get_backend(variant: CalendarVariant) -> CalendarBackend:
    """Return the shared backend serving a calendar variant.

    Args:
        variant: "islamic-umalqura" (observational) or "islamic-tbla" (tabular)

    Returns:
        The backend instance; may be the fallback backend when the
        observational calendar is disabled or unavailable

    Raises:
        InvalidInput: If the variant is not a known calendar token
    """
    if variant not in CALENDAR_VARIANTS:
        valid = ", ".join(CALENDAR_VARIANTS)
        raise InvalidInput(
            f"Unknown calendar variant: {variant!r}\n"
            f"Valid calendars: {valid}\n"
        )

    resolved = _resolve(variant)
    with _lock:
        backend = _backends.get(resolved)
        if backend is None:
            if resolved == "islamic-umalqura":
                config = get_config()
                backend = ObservationalBackend(
                    cache_enabled=config.cache_enabled,
                    cache_max_size=config.cache_max_size,
                )
            else:
                backend = TabularBackend()
            _backends[resolved] = backend
        return backend


def reset_backends() -> None:
    """Drop shared backends (and their caches) so the next lookup rebuilds them.

    Call after changing cache settings with ``set_config``.
    """
    global _host_available
    with _lock:
        _backends.clear()
        _host_available = None


__all__ = [
    "CalendarBackend",
    "LunarTriple",
    "MonthLengthCache",
    "ObservationalBackend",
    "TabularBackend",
    "get_backend",
    "host_calendar_available",
    "reset_backends",
]
