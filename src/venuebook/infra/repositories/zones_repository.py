"""Zones repository - read-only access to zone reference data."""

from __future__ import annotations

from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from venuebook.domain.models import Zone
from venuebook.domain.ports import ZoneDirectory
from venuebook.infra.db import fetchall, fetchone, txn

_COLUMNS = "id, parent_zone_id, is_main_zone, is_active, facility_id, name"


def _row_to_zone(row: tuple) -> Zone:
    return Zone(
        id=str(row[0]),
        parent_zone_id=str(row[1]) if row[1] is not None else None,
        is_main_zone=bool(row[2]),
        is_active=bool(row[3]),
        facility_id=str(row[4]) if row[4] is not None else None,
        name=row[5],
    )


def get_zone(cur: PgCursor, zone_id: str) -> Zone | None:
    row = fetchone(cur, f"SELECT {_COLUMNS} FROM zones WHERE id = %s", (zone_id,))
    return _row_to_zone(row) if row is not None else None


def list_active_zones(cur: PgCursor) -> list[Zone]:
    rows = fetchall(
        cur,
        f"SELECT {_COLUMNS} FROM zones WHERE is_active ORDER BY facility_id, id",
    )
    return [_row_to_zone(row) for row in rows]


def list_child_zones(cur: PgCursor, zone_id: str) -> list[Zone]:
    rows = fetchall(
        cur,
        f"SELECT {_COLUMNS} FROM zones WHERE parent_zone_id = %s ORDER BY id",
        (zone_id,),
    )
    return [_row_to_zone(row) for row in rows]


class PgZoneDirectory(ZoneDirectory):
    def __init__(self, conn: PgConnection | None = None) -> None:
        self._conn = conn

    def get_zone(self, zone_id: str) -> Zone | None:
        with txn(self._conn) as cur:
            return get_zone(cur, zone_id)

    def list_active_zones(self) -> list[Zone]:
        with txn(self._conn) as cur:
            return list_active_zones(cur)

    def list_child_zones(self, zone_id: str) -> list[Zone]:
        with txn(self._conn) as cur:
            return list_child_zones(cur, zone_id)
