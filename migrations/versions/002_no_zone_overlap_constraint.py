"""DB-level exclusion constraint for same-zone overlaps.

Occupying reservations (every status except cancelled and rejected) on the
same zone_id may not have intersecting tstzrange(start_at, end_at, '[)').
The application-level conflict check is advisory; this constraint holds
even when two writers race past it.

Revision ID: 002_no_zone_overlap_constraint
Revises: 001_zones_reservations
Create Date: 2026-10-12
"""
from __future__ import annotations

from pathlib import Path

from alembic import op

revision = "002_no_zone_overlap_constraint"
down_revision = "001_zones_reservations"
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parent.parent / "sql" / "002_no_zone_overlap_constraint.sql"


def upgrade() -> None:
    op.execute(_SQL_FILE.read_text(encoding="utf-8"))


def downgrade() -> None:
    op.execute("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS no_zone_overlap")
    # btree_gist stays installed; other indexes may use it.
