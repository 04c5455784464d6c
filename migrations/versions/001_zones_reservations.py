"""Zones and reservations schema (SQL-only).

Revision ID: 001_zones_reservations
Revises:
Create Date: 2026-10-12
"""

from __future__ import annotations

from pathlib import Path

from alembic import op


# revision identifiers, used by Alembic.
revision = "001_zones_reservations"
down_revision = None
branch_labels = None
depends_on = None


def _read_sql() -> str:
    sql_path = Path(__file__).resolve().parents[1] / "sql" / "001_zones_reservations.sql"
    return sql_path.read_text(encoding="utf-8")


def upgrade() -> None:
    # Raw execution so the DO $$ ... $$ block is sent as-is.
    conn = op.get_bind()
    conn.exec_driver_sql(_read_sql())


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS reservations")
    op.execute("DROP TABLE IF EXISTS zones")
    op.execute("DROP TYPE IF EXISTS reservation_status")
