"""Zone conflict detection across the venue hierarchy.

A zone with a parent is a sub-zone of a whole-venue (main) zone. Booking a
sub-zone occupies the parent slot, and booking the main zone occupies every
child. So a check on zone Z looks at:

1. reservations on Z itself
2. reservations on Z's parent, if any
3. reservations on Z's children, if Z is a main zone

Overlap formula:  (new_start < existing_end) AND (new_end > existing_start)

The result is advisory: it reflects what was visible at read time. The
reservations table carries an exclusion constraint for same-zone overlaps.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, time, tzinfo

from venuebook.domain.errors import NotFoundError, ValidationError
from venuebook.domain.models import (
    OCCUPYING_STATUSES,
    ConflictResult,
    Reservation,
    Zone,
)
from venuebook.domain.ports import ReservationStore, ZoneDirectory
from venuebook.observability.logging import get_logger

logger = get_logger(__name__)

_TIME_SLOT_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\s*$")


class ConflictResolver:
    """Occupancy oracle over a zone directory and a reservation store."""

    def __init__(self, zones: ZoneDirectory, reservations: ReservationStore) -> None:
        self._zones = zones
        self._reservations = reservations

    def check_conflicts(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        exclude_id: str | None = None,
    ) -> ConflictResult:
        """Check whether zone_id is free for [start, end).

        When a conflict is found, every other active zone is checked once
        (hierarchy included, no further alternative search) and the free ones
        are returned as alternatives.

        Args:
            zone_id: Zone to book.
            start: Desired start (inclusive).
            end: Desired end (exclusive).
            exclude_id: Reservation to ignore (when moving an existing booking).

        Returns:
            ConflictResult with conflicting reservations and free alternatives.

        Raises:
            NotFoundError: zone_id is unknown.
            ValidationError: start is not before end.
        """
        _validate_range(start, end)
        zone = self.get_zone(zone_id)

        conflicting = self._find_conflicts(zone, start, end, exclude_id)
        if not conflicting:
            return ConflictResult(has_conflict=False)

        alternatives = self._find_alternatives(zone.id, start, end, exclude_id)

        logger.warning(
            "zone conflict detected",
            extra={
                "extra_fields": {
                    "zone_id": zone.id,
                    "requested_start": start.isoformat(),
                    "requested_end": end.isoformat(),
                    "conflicting_reservation_ids": [r.id for r in conflicting],
                    "alternative_zone_ids": [z.id for z in alternatives],
                },
            },
        )
        return ConflictResult(
            has_conflict=True,
            conflicting=tuple(conflicting),
            alternatives=tuple(alternatives),
        )

    def is_zone_free(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        exclude_id: str | None = None,
    ) -> bool:
        """Single-level occupancy check without the alternative search."""
        return not self.find_conflicts(zone_id, start, end, exclude_id)

    def find_conflicts(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        exclude_id: str | None = None,
    ) -> list[Reservation]:
        """Return occupying reservations blocking zone_id over [start, end)."""
        _validate_range(start, end)
        zone = self.get_zone(zone_id)
        return self._find_conflicts(zone, start, end, exclude_id)

    def get_availability(
        self,
        zone_id: str,
        day: date,
        time_slots: Iterable[str],
        tz: tzinfo | None = None,
    ) -> dict[str, bool]:
        """Map each "HH:MM-HH:MM" slot on day to whether the zone is free.

        Args:
            zone_id: Zone to look at.
            day: Calendar day the slots fall on.
            time_slots: Slots such as "10:00-12:00".
            tz: Timezone for the slot datetimes (naive when None).

        Raises:
            NotFoundError: zone_id is unknown.
            ValidationError: a slot is malformed or ends before it starts.
        """
        zone = self.get_zone(zone_id)
        availability: dict[str, bool] = {}
        for slot in time_slots:
            slot_start, slot_end = parse_time_slot(day, slot, tz)
            _validate_range(slot_start, slot_end)
            availability[slot] = not self._find_conflicts(zone, slot_start, slot_end, None)
        return availability

    def get_zone(self, zone_id: str) -> Zone:
        """Resolve zone_id or raise NotFoundError."""
        zone = self._zones.get_zone(zone_id)
        if zone is None:
            raise NotFoundError(zone_id)
        return zone

    # ── internals ──────────────────────────────────────────────────────────

    def _find_conflicts(
        self,
        zone: Zone,
        start: datetime,
        end: datetime,
        exclude_id: str | None,
    ) -> list[Reservation]:
        zone_ids = [zone.id]
        if zone.parent_zone_id:
            zone_ids.append(zone.parent_zone_id)
        if zone.is_main_zone:
            zone_ids.extend(child.id for child in self._zones.list_child_zones(zone.id))

        seen: set[str] = set()
        found: list[Reservation] = []
        for candidate_zone_id in zone_ids:
            rows = self._reservations.query(
                candidate_zone_id, start, end, statuses=OCCUPYING_STATUSES
            )
            for reservation in rows:
                if reservation.id == exclude_id or reservation.id in seen:
                    continue
                # Inert or non-overlapping rows never count, whatever the store returned.
                if reservation.is_inert or not reservation.overlaps(start, end):
                    continue
                seen.add(reservation.id)
                found.append(reservation)
        return found

    def _find_alternatives(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        exclude_id: str | None,
    ) -> list[Zone]:
        # One level only: alternatives are checked with _find_conflicts,
        # never with check_conflicts, so there is no nested search.
        return [
            candidate
            for candidate in self._zones.list_active_zones()
            if candidate.id != zone_id
            and candidate.is_active
            and not self._find_conflicts(candidate, start, end, exclude_id)
        ]


def _validate_range(start: datetime, end: datetime) -> None:
    if not start < end:
        raise ValidationError(
            f"start ({start.isoformat()}) must be before end ({end.isoformat()})"
        )


def parse_time_slot(
    day: date, slot: str, tz: tzinfo | None = None
) -> tuple[datetime, datetime]:
    """Parse "HH:MM-HH:MM" into a (start, end) pair on day.

    Raises:
        ValidationError: slot is not in HH:MM-HH:MM form.
    """
    match = _TIME_SLOT_RE.match(slot)
    if match is None:
        raise ValidationError(f"Invalid time slot {slot!r}, expected HH:MM-HH:MM")
    start_h, start_m, end_h, end_m = (int(part) for part in match.groups())
    try:
        slot_start = datetime.combine(day, time(start_h, start_m), tzinfo=tz)
        slot_end = datetime.combine(day, time(end_h, end_m), tzinfo=tz)
    except ValueError:
        raise ValidationError(f"Invalid time slot {slot!r}") from None
    return slot_start, slot_end
