"""psycopg2 plumbing for the PostgreSQL stores.

Connections come from DATABASE_URL (URL or key=value DSN). Each store call
runs inside txn(), which commits on success and rolls back and re-raises
on any error.
"""

import os
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

Row = tuple[Any, ...]


def _dsn_has_password(dsn: str) -> bool:
    if "://" in dsn:
        netloc = dsn.split("://", 1)[1].split("/", 1)[0]
        userinfo = netloc.rsplit("@", 1)[0] if "@" in netloc else ""
        return ":" in userinfo
    return any(part.startswith("password=") for part in dsn.split())


def _connect_kwargs(dsn: str) -> dict[str, str]:
    # Secret managers often mount the password apart from the DSN
    db_password = os.environ.get("DB_PASSWORD")
    if db_password and not _dsn_has_password(dsn):
        return {"password": db_password}
    return {}


def get_conn() -> PgConnection:
    """Open a connection to DATABASE_URL, adding DB_PASSWORD if the DSN lacks one.

    Raises:
        RuntimeError: DATABASE_URL is not set.
        psycopg2.Error: the server refused the connection.
    """
    dsn = os.environ.get("DATABASE_URL")
    if not dsn:
        raise RuntimeError("DATABASE_URL environment variable not set")
    return psycopg2.connect(dsn, **_connect_kwargs(dsn))


@contextmanager
def txn(conn: PgConnection | None = None) -> Iterator[PgCursor]:
    """Yield a cursor inside one transaction.

    A connection opened here (conn=None) is closed on exit; a caller's
    connection is left open.

        with txn() as cur:
            rows = fetchall(cur, "SELECT id FROM zones")
    """
    owns_conn = conn is None
    if owns_conn:
        conn = get_conn()

    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if owns_conn:
            conn.close()


def fetchone(cur: PgCursor, query: str, params: Sequence[Any] | None = None) -> Row | None:
    cur.execute(query, params)
    return cur.fetchone()


def fetchall(cur: PgCursor, query: str, params: Sequence[Any] | None = None) -> list[Row]:
    cur.execute(query, params)
    return cur.fetchall()
