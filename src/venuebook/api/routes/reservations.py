"""Reservation creation endpoints.

POST /reservations                    → single booking (409 on conflict)
POST /reservations/recurring          → expand and insert a series
POST /reservations/recurring/preview  → per-date outcome, inserts nothing
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from venuebook.api.dependencies import Engine, engine_errors, get_engine, resolve_timezone
from venuebook.api.schemas import (
    RecurringReservationRequest,
    ReservationIn,
    preview_to_dict,
    reservation_to_dict,
)
from venuebook.domain.errors import ReservationConflictError

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("", status_code=201)
def create_reservation(
    body: ReservationIn,
    engine: Engine = Depends(get_engine),
) -> dict:
    with engine_errors():
        try:
            created = engine.bookings.create_reservation(body.to_domain())
        except ReservationConflictError as exc:
            raise HTTPException(
                status_code=409,
                detail={
                    "code": "CONFLICT",
                    "conflicting_reservation_ids": exc.conflicting_reservation_ids,
                    "alternative_zone_ids": exc.alternative_zone_ids,
                },
            ) from exc
    return reservation_to_dict(created)


@router.post("/recurring", status_code=201)
def create_recurring_reservations(
    body: RecurringReservationRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    """Create every conflict-free instance of a recurring series.

    Conflicting dates are skipped; the response lists created instances only.
    Dates step in body.tz wall-clock time, so 09:00 stays 09:00 across DST.
    """
    zone_info = resolve_timezone(body.tz)
    with engine_errors():
        created = engine.bookings.create_recurring_series(
            body.base.to_domain(zone_info), body.pattern.to_domain()
        )
    return {"created": [reservation_to_dict(r) for r in created]}


@router.post("/recurring/preview")
def preview_recurring_reservations(
    body: RecurringReservationRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    zone_info = resolve_timezone(body.tz)
    with engine_errors():
        previews = engine.expander.preview(body.base.to_domain(zone_info), body.pattern.to_domain())
    return {"occurrences": [preview_to_dict(p) for p in previews]}
