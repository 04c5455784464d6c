"""Reservations repository - persistence for reservation records.

Uses raw SQL with psycopg2 (no ORM). Time ranges are half-open:
a row overlaps [start, end) when start_at < end AND end_at > start.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from venuebook.domain.models import Reservation, ReservationStatus
from venuebook.domain.ports import ReservationStore
from venuebook.infra.db import txn

_COLUMNS = (
    "id, zone_id, facility_id, start_at, end_at, status, "
    "recurrence_group_id, created_at, updated_at"
)


def _row_to_reservation(row: tuple) -> Reservation:
    return Reservation(
        id=str(row[0]),
        zone_id=str(row[1]),
        facility_id=str(row[2]),
        start_date=row[3],
        end_date=row[4],
        status=ReservationStatus(row[5]),
        recurrence_group_id=str(row[6]) if row[6] is not None else None,
        created_at=row[7],
        updated_at=row[8],
    )


def query_reservations(
    cur: PgCursor,
    *,
    zone_id: str,
    start: datetime,
    end: datetime,
    statuses: Iterable[ReservationStatus] | None = None,
) -> list[Reservation]:
    """Fetch reservations on zone_id overlapping [start, end).

    Args:
        cur: Database cursor.
        zone_id: Zone identifier (exact match).
        start: Range start (inclusive).
        end: Range end (exclusive).
        statuses: Optional status filter.

    Returns:
        Reservations ordered by start_at.
    """
    conditions = [
        "zone_id = %s",
        "start_at < %s",  # existing start < new end
        "end_at > %s",    # existing end > new start
    ]
    params: list = [zone_id, end, start]

    if statuses is not None:
        conditions.append("status = ANY(%s::reservation_status[])")
        params.append([ReservationStatus(s).value for s in statuses])

    where = " AND ".join(conditions)
    cur.execute(
        f"""
        SELECT {_COLUMNS}
        FROM reservations
        WHERE {where}
        ORDER BY start_at, id
        """,
        params,
    )
    return [_row_to_reservation(row) for row in cur.fetchall()]


def insert_reservation(cur: PgCursor, reservation: Reservation) -> Reservation:
    """Insert a reservation row and return it as stored.

    Overlapping occupying rows on the same zone are rejected by the
    no_zone_overlap exclusion constraint (psycopg2 raises ExclusionViolation).
    """
    cur.execute(
        f"""
        INSERT INTO reservations (
            id, zone_id, facility_id, start_at, end_at, status,
            recurrence_group_id, created_at, updated_at
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, COALESCE(%s, now()), COALESCE(%s, now()))
        RETURNING {_COLUMNS}
        """,
        (
            reservation.id,
            reservation.zone_id,
            reservation.facility_id,
            reservation.start_date,
            reservation.end_date,
            ReservationStatus(reservation.status).value,
            reservation.recurrence_group_id,
            reservation.created_at,
            reservation.updated_at,
        ),
    )
    return _row_to_reservation(cur.fetchone())


class PgReservationStore(ReservationStore):
    """ReservationStore over the reservations table.

    Each call runs in its own short transaction. Pass conn to reuse one
    connection; otherwise a connection is opened per call.
    """

    def __init__(self, conn: PgConnection | None = None) -> None:
        self._conn = conn

    def query(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        statuses: Iterable[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        with txn(self._conn) as cur:
            return query_reservations(
                cur, zone_id=zone_id, start=start, end=end, statuses=statuses
            )

    def insert(self, reservation: Reservation) -> Reservation:
        with txn(self._conn) as cur:
            return insert_reservation(cur, reservation)
