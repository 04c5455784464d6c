"""Storage ports consumed by the conflict resolver and recurrence expander.

Each backend (PostgreSQL, in-memory) implements these and is passed in
through constructors; nothing here is resolved from module globals.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from venuebook.domain.models import Reservation, ReservationStatus, Zone


class ReservationStore(ABC):
    @abstractmethod
    def query(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        statuses: Iterable[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        """Return reservations on zone_id overlapping [start, end).

        Args:
            zone_id: Zone to look at (exact match, no hierarchy).
            start: Range start (inclusive).
            end: Range end (exclusive).
            statuses: If given, only reservations in these statuses.

        Returns:
            Matching reservations ordered by start_date.
        """

    @abstractmethod
    def insert(self, reservation: Reservation) -> Reservation:
        """Persist a new reservation and return the stored row."""


class ZoneDirectory(ABC):
    @abstractmethod
    def get_zone(self, zone_id: str) -> Zone | None:
        """Return the zone, or None if unknown."""

    @abstractmethod
    def list_active_zones(self) -> list[Zone]:
        """Return every active zone."""

    @abstractmethod
    def list_child_zones(self, zone_id: str) -> list[Zone]:
        """Return zones whose parent is zone_id, active or not."""
