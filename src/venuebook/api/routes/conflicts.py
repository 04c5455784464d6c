"""Conflict and availability endpoints.

POST /conflicts/check                 → conflict check with alternatives
GET  /zones/{zone_id}/availability    → free/busy per time slot on a day
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Path, Query

from venuebook.api.dependencies import Engine, engine_errors, get_engine, resolve_timezone
from venuebook.api.schemas import CheckConflictsRequest, conflict_result_to_dict

router = APIRouter(tags=["conflicts"])


@router.post("/conflicts/check")
def check_conflicts(
    body: CheckConflictsRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    """Report overlapping reservations across the zone hierarchy.

    A conflict is a normal 200 response with has_conflict=true.
    """
    with engine_errors():
        result = engine.resolver.check_conflicts(
            body.zone_id, body.start, body.end, exclude_id=body.exclude_id
        )
    return conflict_result_to_dict(result)


@router.get("/zones/{zone_id}/availability")
def zone_availability(
    zone_id: str = Path(...),
    day: date = Query(..., alias="date"),
    slots: list[str] = Query(...),
    tz: str = Query("UTC"),
    engine: Engine = Depends(get_engine),
) -> dict:
    """Slots are "HH:MM-HH:MM" wall-clock times in tz (an IANA name)."""
    zone_info = resolve_timezone(tz)
    with engine_errors():
        availability = engine.resolver.get_availability(zone_id, day, slots, zone_info)
    return {"zone_id": zone_id, "date": day.isoformat(), "tz": tz, "slots": availability}
