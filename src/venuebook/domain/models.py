"""Domain types for zone booking.

Reservations occupy a half-open interval [start_date, end_date) on one zone.
Overlap formula:  (a_start < b_end) AND (a_end > b_start)
Strict inequality allows back-to-back bookings (end A == start B is OK).

Only occupying statuses generate conflicts; cancelled and rejected
reservations are inert.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class ReservationStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    NO_SHOW = "no_show"


INERT_STATUSES = (ReservationStatus.CANCELLED, ReservationStatus.REJECTED)

OCCUPYING_STATUSES = tuple(s for s in ReservationStatus if s not in INERT_STATUSES)


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class Zone:
    """A bookable zone.

    Attributes:
        id: Zone identifier.
        parent_zone_id: The whole-venue zone this zone subdivides, if any.
        is_main_zone: True when the zone represents the whole venue.
        is_active: Inactive zones are never offered as alternatives.
        facility_id: Owning facility (informational).
        name: Display name (informational).
    """

    id: str
    parent_zone_id: str | None = None
    is_main_zone: bool = False
    is_active: bool = True
    facility_id: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class Reservation:
    id: str
    zone_id: str
    facility_id: str
    start_date: datetime
    end_date: datetime
    status: ReservationStatus = ReservationStatus.PENDING_APPROVAL
    recurrence_group_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_inert(self) -> bool:
        return self.status in INERT_STATUSES

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return overlaps(self.start_date, self.end_date, start, end)


@dataclass(frozen=True)
class RecurrencePattern:
    """Rule for repeating a base reservation.

    Attributes:
        type: Step unit (daily, weekly, monthly).
        interval: Step size in units of type. Must be >= 1.
        end_date: Last instant a series instance may start at (inclusive).
        days_of_week: Weekday filter for weekly patterns (0 = Sunday).
        exceptions: Calendar dates that never produce an instance.
        occurrences: Optional cap on accepted instances for this series.
    """

    type: RecurrenceType
    interval: int = 1
    end_date: date | datetime | None = None
    days_of_week: frozenset[int] | None = None
    exceptions: frozenset[date] = field(default_factory=frozenset)
    occurrences: int | None = None


@dataclass(frozen=True)
class ConflictResult:
    has_conflict: bool
    conflicting: tuple[Reservation, ...] = ()
    alternatives: tuple[Zone, ...] = ()


def overlaps(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """Return True if [a_start, a_end) and [b_start, b_end) intersect."""
    return a_start < b_end and a_end > b_start


def js_weekday(value: date) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6."""
    return (value.weekday() + 1) % 7
