"""In-memory ZoneDirectory and ReservationStore.

Used for local runs and tests. The store is guarded by a lock so it can be
shared between threads; it does not enforce the no-overlap constraint that
the PostgreSQL schema does.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime

from venuebook.domain.errors import ValidationError
from venuebook.domain.models import Reservation, ReservationStatus, Zone
from venuebook.domain.ports import ReservationStore, ZoneDirectory


class InMemoryZoneDirectory(ZoneDirectory):
    """Zone tree held in a dict.

    Raises:
        ValidationError: duplicate ids, unknown parent, or a parent cycle.
    """

    def __init__(self, zones: Iterable[Zone] = ()) -> None:
        self._zones: dict[str, Zone] = {}
        for zone in zones:
            if zone.id in self._zones:
                raise ValidationError(f"Duplicate zone id {zone.id}")
            self._zones[zone.id] = zone
        _validate_tree(self._zones)

    def get_zone(self, zone_id: str) -> Zone | None:
        return self._zones.get(zone_id)

    def list_active_zones(self) -> list[Zone]:
        return [zone for zone in self._zones.values() if zone.is_active]

    def list_child_zones(self, zone_id: str) -> list[Zone]:
        return [zone for zone in self._zones.values() if zone.parent_zone_id == zone_id]


def _validate_tree(zones: dict[str, Zone]) -> None:
    for zone in zones.values():
        if zone.parent_zone_id is None:
            continue
        if zone.parent_zone_id == zone.id:
            raise ValidationError(f"Zone {zone.id} cannot be its own parent")
        if zone.parent_zone_id not in zones:
            raise ValidationError(
                f"Zone {zone.id} references unknown parent {zone.parent_zone_id}"
            )

    for zone in zones.values():
        visited = {zone.id}
        parent_id = zone.parent_zone_id
        while parent_id is not None:
            if parent_id in visited:
                raise ValidationError(f"Zone {zone.id} is part of a parent cycle")
            visited.add(parent_id)
            parent_id = zones[parent_id].parent_zone_id


class InMemoryReservationStore(ReservationStore):
    def __init__(self, reservations: Iterable[Reservation] = ()) -> None:
        self._lock = threading.Lock()
        self._rows: dict[str, Reservation] = {r.id: r for r in reservations}

    def query(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        statuses: Iterable[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        allowed = {ReservationStatus(s) for s in statuses} if statuses is not None else None
        with self._lock:
            rows = [
                r
                for r in self._rows.values()
                if r.zone_id == zone_id
                and r.overlaps(start, end)
                and (allowed is None or r.status in allowed)
            ]
        return sorted(rows, key=lambda r: (r.start_date, r.id))

    def insert(self, reservation: Reservation) -> Reservation:
        with self._lock:
            if reservation.id in self._rows:
                raise ValueError(f"Reservation {reservation.id} already exists")
            self._rows[reservation.id] = reservation
        return reservation

    def all(self) -> list[Reservation]:
        with self._lock:
            return sorted(self._rows.values(), key=lambda r: (r.start_date, r.id))
