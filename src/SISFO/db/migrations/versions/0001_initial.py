"""Create academic core tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

import logging

from alembic import op

from SISFO.db.models import Base

log = logging.getLogger(__name__)

# ---- Alembic identifiers ----
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

# Seconds since midnight of an HH:MM:SS string; declared IMMUTABLE so it can back an index.
SLOT_RANGE_FN = """
CREATE OR REPLACE FUNCTION sisfo_slot_range(start_time text, end_time text)
RETURNS int4range LANGUAGE sql IMMUTABLE AS $$
    SELECT int4range(
        split_part(start_time, ':', 1)::int * 3600
            + split_part(start_time, ':', 2)::int * 60
            + split_part(start_time, ':', 3)::int,
        split_part(end_time, ':', 1)::int * 3600
            + split_part(end_time, ':', 2)::int * 60
            + split_part(end_time, ':', 3)::int,
        '[)'
    )
$$;
"""

# name -> (resource column, extra predicate)
EXCLUSIONS = {
    "ex_schedules_class_slot": ("class_id", ""),
    "ex_schedules_teacher_slot": ("teacher_id", ""),
    "ex_schedules_room_slot": ("room", " AND room <> ''"),
}


def upgrade() -> None:
    bind = op.get_bind()
    Base.metadata.create_all(bind=bind)
    log.info("created %d tables", len(Base.metadata.tables))

    if bind.dialect.name != "postgresql":
        return

    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(SLOT_RANGE_FN)
    for name, (column, extra) in EXCLUSIONS.items():
        op.execute(
            f"ALTER TABLE schedules ADD CONSTRAINT {name} EXCLUDE USING gist ("
            f"tenant_id WITH =, {column} WITH =, day_of_week WITH =, "
            f"sisfo_slot_range(start_time, end_time) WITH &&"
            f") WHERE (deleted_at IS NULL{extra})"
        )


def downgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name in EXCLUSIONS:
            op.execute(f"ALTER TABLE schedules DROP CONSTRAINT IF EXISTS {name}")
        op.execute("DROP FUNCTION IF EXISTS sisfo_slot_range(text, text)")
    Base.metadata.drop_all(bind=bind)
