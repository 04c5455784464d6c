"""Alembic environment for the venuebook schema.

Revisions are plain SQL files under migrations/sql; there is no SQLAlchemy
metadata, so autogenerate is not available.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from migrations.env_helpers import get_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _run(**configure_kwargs) -> None:
    context.configure(target_metadata=None, **configure_kwargs)
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    _run(url=get_database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})


def run_online() -> None:
    section = dict(config.get_section(config.config_ini_section) or {})
    section["sqlalchemy.url"] = get_database_url()
    engine = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with engine.connect() as connection:
        _run(connection=connection)


if context.is_offline_mode():
    run_offline()
else:
    run_online()
