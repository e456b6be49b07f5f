import pytest

from hijri_rrule.calendars import reset_backends
from hijri_rrule.config import reset_config, set_config


@pytest.fixture(autouse=True)
def tabular_calendar():
    """Run every test against the deterministic tabular calendar by default."""
    set_config(default_calendar="islamic-tbla")
    yield
    reset_config()
    reset_backends()
