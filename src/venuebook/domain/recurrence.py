"""Recurring reservation expansion.

One base reservation plus a RecurrencePattern becomes a series of
independent reservations sharing a recurrence_group_id.

Walk (cursor starts at base.start_date, runs while cursor <= end_date):
1. cursor date in exceptions  -> no instance, step per pattern type
2. weekly with days_of_week and cursor weekday not in it -> cursor += 1 day
3. otherwise a candidate: same time-of-day span as base on cursor's date;
   inserted if the zone is free, silently skipped if not; step per type

Step per type: daily +interval days, weekly +interval*7 days,
monthly +interval calendar months keeping the base day-of-month
(clamped to the month's last day).

A series with gaps is a valid outcome. Limits are enforced before the first
insert, so a LimitExceededError never leaves a partial series behind.
Store failures mid-series leave earlier instances persisted.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Literal

from venuebook.domain.errors import LimitExceededError, ValidationError
from venuebook.domain.models import (
    RecurrencePattern,
    RecurrenceType,
    Reservation,
    js_weekday,
    overlaps,
)
from venuebook.domain.ports import ReservationStore
from venuebook.domain.zone_conflict import ConflictResolver
from venuebook.infra.settings import EngineSettings
from venuebook.infra.time import Clock, utc_now
from venuebook.observability.logging import get_logger

logger = get_logger(__name__)

PreviewStatus = Literal["available", "conflict", "exception"]


@dataclass(frozen=True)
class OccurrencePreview:
    start: datetime
    end: datetime
    status: PreviewStatus
    conflicting_reservation_ids: tuple[str, ...] = ()


class RecurrenceExpander:
    """Expand a base reservation into conflict-free series instances.

    Candidate dates are processed strictly in order: each conflict check
    sees every instance inserted earlier in the same call.
    """

    def __init__(
        self,
        resolver: ConflictResolver,
        reservations: ReservationStore,
        settings: EngineSettings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._resolver = resolver
        self._reservations = reservations
        self._settings = settings or EngineSettings()
        self._clock = clock

    def generate(self, base: Reservation, pattern: RecurrencePattern) -> list[Reservation]:
        """Insert every free, non-excluded instance of the series.

        Args:
            base: Template reservation; its zone, facility, status and
                time-of-day span are copied to every instance.
            pattern: Recurrence rule.

        Returns:
            The inserted instances, in date order.

        Raises:
            ValidationError: missing end date, interval < 1, bad weekday.
            LimitExceededError: series exceeds the configured caps.
            NotFoundError: base.zone_id is unknown.
        """
        candidates = self.plan(base, pattern)
        self._resolver.get_zone(base.zone_id)
        duration = base.end_date - base.start_date
        group_id = base.recurrence_group_id or base.id

        created: list[Reservation] = []
        skipped = 0
        for start in candidates:
            if pattern.occurrences is not None and len(created) >= pattern.occurrences:
                break
            end = start + duration
            if not self._resolver.is_zone_free(base.zone_id, start, end):
                skipped += 1
                logger.info(
                    "recurrence instance skipped",
                    extra={
                        "extra_fields": {
                            "zone_id": base.zone_id,
                            "recurrence_group_id": group_id,
                            "instance_start": start.isoformat(),
                        },
                    },
                )
                continue

            now = self._clock()
            instance = replace(
                base,
                id=instance_id(base.id, start),
                start_date=start,
                end_date=end,
                recurrence_group_id=group_id,
                created_at=now,
                updated_at=now,
            )
            created.append(self._reservations.insert(instance))

        logger.info(
            "recurrence series generated",
            extra={
                "extra_fields": {
                    "zone_id": base.zone_id,
                    "recurrence_group_id": group_id,
                    "pattern_type": RecurrenceType(pattern.type).value,
                    "created": len(created),
                    "skipped_conflicts": skipped,
                },
            },
        )
        return created

    def plan(self, base: Reservation, pattern: RecurrencePattern) -> list[datetime]:
        """Return candidate start datetimes, without touching any store.

        Exception dates and filtered weekdays are already removed; conflicts
        are not considered.

        Raises:
            ValidationError: pattern or base is malformed.
            LimitExceededError: span or candidate count exceeds the caps.
        """
        series_end = self._validate(base, pattern)
        candidates = [cursor for cursor, excluded in _walk(base.start_date, series_end, pattern) if not excluded]
        if len(candidates) > self._settings.max_instances:
            raise LimitExceededError(
                "instance count", len(candidates), self._settings.max_instances
            )
        return candidates

    def preview(self, base: Reservation, pattern: RecurrencePattern) -> list[OccurrencePreview]:
        """Describe what generate would do for each visited date. Never inserts."""
        self.plan(base, pattern)
        self._resolver.get_zone(base.zone_id)
        series_end = _series_end(base.start_date, pattern.end_date)
        duration = base.end_date - base.start_date

        previews: list[OccurrencePreview] = []
        accepted: list[tuple[datetime, datetime]] = []
        for start, excluded in _walk(base.start_date, series_end, pattern):
            if pattern.occurrences is not None and len(accepted) >= pattern.occurrences:
                break
            end = start + duration
            if excluded:
                previews.append(OccurrencePreview(start, end, "exception"))
                continue

            blocking = [
                r.id for r in self._resolver.find_conflicts(base.zone_id, start, end)
            ]
            # Earlier available instances count as already inserted
            blocking += [
                instance_id(base.id, s) for s, e in accepted if overlaps(s, e, start, end)
            ]

            if blocking:
                previews.append(OccurrencePreview(start, end, "conflict", tuple(blocking)))
            else:
                accepted.append((start, end))
                previews.append(OccurrencePreview(start, end, "available"))
        return previews

    def _validate(self, base: Reservation, pattern: RecurrencePattern) -> datetime:
        if pattern.end_date is None:
            raise ValidationError("Recurrence end date is required")
        try:
            RecurrenceType(pattern.type)
        except ValueError:
            raise ValidationError(f"Unknown recurrence type {pattern.type!r}") from None
        if not isinstance(pattern.interval, int) or pattern.interval < 1:
            raise ValidationError(f"Recurrence interval must be a positive integer, got {pattern.interval!r}")
        if pattern.days_of_week is not None and any(
            not 0 <= day <= 6 for day in pattern.days_of_week
        ):
            raise ValidationError("days_of_week values must be between 0 (Sunday) and 6 (Saturday)")
        if pattern.occurrences is not None and pattern.occurrences < 1:
            raise ValidationError("occurrences must be >= 1 when set")
        if _is_naive(base.start_date) != _is_naive(base.end_date):
            raise ValidationError("Base start and end must both be timezone-aware or both naive")
        if not base.start_date < base.end_date:
            raise ValidationError("Base reservation must start before it ends")

        series_end = _series_end(base.start_date, pattern.end_date)
        if _is_naive(series_end) != _is_naive(base.start_date):
            raise ValidationError("Recurrence end date and base start must both be timezone-aware or both naive")
        span_days = (series_end - base.start_date).days
        if span_days > self._settings.max_span_days:
            raise LimitExceededError("span in days", span_days, self._settings.max_span_days)
        return series_end


def instance_id(base_id: str, start: datetime) -> str:
    return f"{base_id}-{start.strftime('%Y%m%dT%H%M%S')}"


def _is_naive(value: datetime) -> bool:
    return value.tzinfo is None or value.utcoffset() is None


def _series_end(anchor: datetime, end: date | datetime) -> datetime:
    # A bare date includes the whole day, in the anchor's timezone
    if not isinstance(end, datetime):
        return datetime.combine(end, time.max, tzinfo=anchor.tzinfo)
    return end


def _walk(
    anchor: datetime,
    series_end: datetime,
    pattern: RecurrencePattern,
) -> Iterator[tuple[datetime, bool]]:
    """Yield (cursor, is_exception) for every date the series visits."""
    kind = RecurrenceType(pattern.type)
    # An empty set is still a filter: it matches no weekday
    weekday_filter = pattern.days_of_week if kind is RecurrenceType.WEEKLY else None
    exceptions = {d.date() if isinstance(d, datetime) else d for d in pattern.exceptions or ()}

    cursor = anchor
    months = 0
    while cursor <= series_end:
        if cursor.date() in exceptions:
            yield cursor, True
        elif weekday_filter is not None and js_weekday(cursor) not in weekday_filter:
            cursor += timedelta(days=1)
            continue
        else:
            yield cursor, False

        if kind is RecurrenceType.DAILY:
            cursor += timedelta(days=pattern.interval)
        elif kind is RecurrenceType.WEEKLY:
            cursor += timedelta(weeks=pattern.interval)
        else:
            months += pattern.interval
            cursor = add_months(anchor, months)


def add_months(value: datetime, months: int) -> datetime:
    """Shift value by whole calendar months, clamping the day to month end."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
