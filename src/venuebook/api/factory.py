"""FastAPI application factory for the booking engine."""

from __future__ import annotations

from fastapi import FastAPI, Request, Response

from venuebook.api.dependencies import Engine
from venuebook.api.routes import conflicts, reservations
from venuebook.domain.ports import ReservationStore, ZoneDirectory
from venuebook.domain.recurrence import RecurrenceExpander
from venuebook.domain.zone_conflict import ConflictResolver
from venuebook.infra.settings import EngineSettings, load_engine_settings
from venuebook.observability.correlation import CORRELATION_ID_HEADER, correlation_scope
from venuebook.services.booking_service import BookingService


def build_engine(
    zones: ZoneDirectory,
    reservations: ReservationStore,
    settings: EngineSettings | None = None,
) -> Engine:
    """Wire resolver, expander and booking service over the given stores."""
    resolver = ConflictResolver(zones, reservations)
    expander = RecurrenceExpander(resolver, reservations, settings or load_engine_settings())
    return Engine(
        resolver=resolver,
        expander=expander,
        bookings=BookingService(resolver, expander, reservations),
    )


def create_app(engine: Engine | None = None) -> FastAPI:
    """Create the FastAPI app.

    Args:
        engine: Pre-wired engine. If None, uses the PostgreSQL stores
                (DATABASE_URL is read on first query, not here).

    Returns:
        Configured FastAPI application.
    """
    if engine is None:
        from venuebook.infra.repositories.reservations_repository import PgReservationStore
        from venuebook.infra.repositories.zones_repository import PgZoneDirectory

        engine = build_engine(PgZoneDirectory(), PgReservationStore())

    app = FastAPI(
        title="Venuebook",
        docs_url=None,
        redoc_url=None,
    )
    app.state.engine = engine

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_ID_HEADER)) as cid:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint."""
        return {"status": "ok"}

    app.include_router(conflicts.router)
    app.include_router(reservations.router)

    return app
