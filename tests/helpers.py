"""Shared test helper functions for venuebook tests.

Regular functions and constants, not fixtures.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from venuebook.domain.models import Reservation, ReservationStatus

UTC = timezone.utc

# 2025-03-03 is a Monday
MONDAY = date(2025, 3, 3)

FIXED_NOW = datetime(2025, 2, 1, 12, 0, tzinfo=UTC)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    """Aware UTC datetime on day at hour:minute."""
    return datetime.combine(day, time(hour, minute), tzinfo=UTC)


def make_reservation(
    reservation_id: str,
    zone_id: str,
    start: datetime,
    end: datetime,
    *,
    status: ReservationStatus = ReservationStatus.CONFIRMED,
    facility_id: str = "fac-1",
    recurrence_group_id: str | None = None,
) -> Reservation:
    return Reservation(
        id=reservation_id,
        zone_id=zone_id,
        facility_id=facility_id,
        start_date=start,
        end_date=end,
        status=status,
        recurrence_group_id=recurrence_group_id,
    )
