"""Database URL helpers for Alembic migrations.

Kept apart from env.py so they can be tested without an alembic context.
"""

from __future__ import annotations

import os
from urllib.parse import quote_plus, urlparse, urlunparse

_DRIVER_PREFIX = "postgresql+psycopg2://"


def normalize_database_url(url: str, db_password: str | None = None) -> str:
    """Turn a postgres:// or postgresql:// URL into a psycopg2 SQLAlchemy URL.

    If db_password is given and the URL has no password, it is injected.
    """
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            url = _DRIVER_PREFIX + url[len(prefix):]
            break

    if db_password:
        parsed = urlparse(url)
        if not parsed.password:
            netloc = f"{quote_plus(parsed.username or '')}:{quote_plus(db_password)}@{parsed.hostname or ''}"
            if parsed.port:
                netloc += f":{parsed.port}"
            url = urlunparse(parsed._replace(netloc=netloc))
    return url


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    if "://" not in url:
        raise RuntimeError("DATABASE_URL must be a URL (postgresql://user@host/db)")
    return normalize_database_url(url, os.environ.get("DB_PASSWORD"))
