"""Request schemas and response serializers for the booking API."""

from __future__ import annotations

import uuid
from datetime import date, tzinfo

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from venuebook.domain.models import (
    ConflictResult,
    RecurrencePattern,
    RecurrenceType,
    Reservation,
    ReservationStatus,
    Zone,
)
from venuebook.domain.recurrence import OccurrencePreview


class CheckConflictsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    zone_id: str
    start: AwareDatetime
    end: AwareDatetime
    exclude_id: str | None = None


class ReservationIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    zone_id: str
    facility_id: str
    start: AwareDatetime
    end: AwareDatetime
    status: ReservationStatus = ReservationStatus.PENDING_APPROVAL
    recurrence_group_id: str | None = None

    def to_domain(self, tz: tzinfo | None = None) -> Reservation:
        """Domain reservation; with tz, start and end are converted into it."""
        start, end = self.start, self.end
        if tz is not None:
            start, end = start.astimezone(tz), end.astimezone(tz)
        return Reservation(
            id=self.id or str(uuid.uuid4()),
            zone_id=self.zone_id,
            facility_id=self.facility_id,
            start_date=start,
            end_date=end,
            status=self.status,
            recurrence_group_id=self.recurrence_group_id,
        )


class RecurrencePatternIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: RecurrenceType
    interval: int = 1
    end_date: AwareDatetime | None = None
    days_of_week: list[int] | None = None
    exceptions: list[date] = Field(default_factory=list)
    occurrences: int | None = None

    def to_domain(self) -> RecurrencePattern:
        return RecurrencePattern(
            type=self.type,
            interval=self.interval,
            end_date=self.end_date,
            days_of_week=frozenset(self.days_of_week) if self.days_of_week is not None else None,
            exceptions=frozenset(self.exceptions),
            occurrences=self.occurrences,
        )


class RecurringReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base: ReservationIn
    pattern: RecurrencePatternIn
    # IANA name; instances keep the base wall-clock time in this zone across DST
    tz: str = "UTC"


def reservation_to_dict(reservation: Reservation) -> dict:
    return {
        "id": reservation.id,
        "zone_id": reservation.zone_id,
        "facility_id": reservation.facility_id,
        "start": reservation.start_date.isoformat(),
        "end": reservation.end_date.isoformat(),
        "status": ReservationStatus(reservation.status).value,
        "recurrence_group_id": reservation.recurrence_group_id,
    }


def zone_to_dict(zone: Zone) -> dict:
    return {
        "id": zone.id,
        "name": zone.name,
        "facility_id": zone.facility_id,
        "parent_zone_id": zone.parent_zone_id,
        "is_main_zone": zone.is_main_zone,
    }


def conflict_result_to_dict(result: ConflictResult) -> dict:
    return {
        "has_conflict": result.has_conflict,
        "conflicting": [reservation_to_dict(r) for r in result.conflicting],
        "alternatives": [zone_to_dict(z) for z in result.alternatives],
    }


def preview_to_dict(preview: OccurrencePreview) -> dict:
    return {
        "start": preview.start.isoformat(),
        "end": preview.end.isoformat(),
        "status": preview.status,
        "conflicting_reservation_ids": list(preview.conflicting_reservation_ids),
    }
