"""Engine wiring shared by the route modules."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import HTTPException, Request

from venuebook.domain.errors import (
    LimitExceededError,
    NotFoundError,
    ValidationError,
)
from venuebook.domain.recurrence import RecurrenceExpander
from venuebook.domain.zone_conflict import ConflictResolver
from venuebook.services.booking_service import BookingService


@dataclass(frozen=True)
class Engine:
    resolver: ConflictResolver
    expander: RecurrenceExpander
    bookings: BookingService


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


@contextmanager
def engine_errors() -> Iterator[None]:
    """Translate engine errors into HTTP errors. Store errors pass through."""
    try:
        yield
    except NotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail={"code": exc.code, "message": str(exc)},
        ) from exc
    except (ValidationError, LimitExceededError) as exc:
        raise HTTPException(
            status_code=422,
            detail={"code": exc.code, "message": str(exc)},
        ) from exc


def resolve_timezone(tz: str) -> ZoneInfo:
    """IANA name -> ZoneInfo; unknown names are a 422 VALIDATION error."""
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(
            status_code=422,
            detail={"code": "VALIDATION", "message": f"Unknown timezone {tz!r}"},
        ) from None
