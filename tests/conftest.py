"""Shared pytest fixtures for venuebook tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from tests.helpers import FIXED_NOW  # noqa: E402
from venuebook.domain.models import Zone  # noqa: E402
from venuebook.domain.recurrence import RecurrenceExpander  # noqa: E402
from venuebook.domain.zone_conflict import ConflictResolver  # noqa: E402
from venuebook.infra.memory import (  # noqa: E402
    InMemoryReservationStore,
    InMemoryZoneDirectory,
)
from venuebook.infra.settings import EngineSettings  # noqa: E402


@pytest.fixture
def zones():
    """Venue A (main) with sub-zones A1/A2, standalone B, inactive C."""
    return InMemoryZoneDirectory(
        [
            Zone("A", is_main_zone=True, facility_id="fac-1", name="Hall"),
            Zone("A1", parent_zone_id="A", facility_id="fac-1", name="Hall north"),
            Zone("A2", parent_zone_id="A", facility_id="fac-1", name="Hall south"),
            Zone("B", facility_id="fac-1", name="Meeting room"),
            Zone("C", is_active=False, facility_id="fac-1", name="Closed room"),
        ]
    )


@pytest.fixture
def store():
    return InMemoryReservationStore()


@pytest.fixture
def resolver(zones, store):
    return ConflictResolver(zones, store)


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def expander(resolver, store, settings):
    return RecurrenceExpander(resolver, store, settings, clock=lambda: FIXED_NOW)
