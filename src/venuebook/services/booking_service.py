"""Booking service - check-then-insert under a per-venue lock.

Conflict checks and inserts for one venue tree (a main zone and its
sub-zones) are serialized in-process by locking the tree's root zone id.
Across processes the reservations table's exclusion constraint is the
authoritative guard for same-zone overlaps.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from venuebook.domain.errors import ReservationConflictError
from venuebook.domain.models import RecurrencePattern, Reservation
from venuebook.domain.ports import ReservationStore
from venuebook.domain.recurrence import RecurrenceExpander
from venuebook.domain.zone_conflict import ConflictResolver
from venuebook.observability.logging import get_logger

logger = get_logger(__name__)


class ZoneLocks:
    """Lazily created threading.Lock per key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield


class BookingService:
    def __init__(
        self,
        resolver: ConflictResolver,
        expander: RecurrenceExpander,
        reservations: ReservationStore,
        locks: ZoneLocks | None = None,
    ) -> None:
        self._resolver = resolver
        self._expander = expander
        self._reservations = reservations
        self._locks = locks or ZoneLocks()

    def create_reservation(self, reservation: Reservation) -> Reservation:
        """Insert a single reservation if its zone is free.

        Raises:
            ReservationConflictError: an occupying reservation overlaps.
            NotFoundError: zone is unknown.
            ValidationError: start is not before end.
        """
        with self._locks.hold(self.venue_key(reservation.zone_id)):
            result = self._resolver.check_conflicts(
                reservation.zone_id,
                reservation.start_date,
                reservation.end_date,
            )
            if result.has_conflict:
                raise ReservationConflictError(
                    zone_id=reservation.zone_id,
                    conflicting_reservation_ids=[r.id for r in result.conflicting],
                    alternative_zone_ids=[z.id for z in result.alternatives],
                )
            created = self._reservations.insert(reservation)

        logger.info(
            "reservation created",
            extra={
                "extra_fields": {
                    "reservation_id": created.id,
                    "zone_id": created.zone_id,
                    "facility_id": created.facility_id,
                },
            },
        )
        return created

    def create_recurring_series(
        self,
        base: Reservation,
        pattern: RecurrencePattern,
    ) -> list[Reservation]:
        """Expand and insert a recurring series; conflicting dates are skipped."""
        with self._locks.hold(self.venue_key(base.zone_id)):
            return self._expander.generate(base, pattern)

    def venue_key(self, zone_id: str) -> str:
        """Id of the root zone of zone_id's tree."""
        zone = self._resolver.get_zone(zone_id)
        seen = {zone.id}
        while zone.parent_zone_id is not None and zone.parent_zone_id not in seen:
            zone = self._resolver.get_zone(zone.parent_zone_id)
            seen.add(zone.id)
        return zone.id
