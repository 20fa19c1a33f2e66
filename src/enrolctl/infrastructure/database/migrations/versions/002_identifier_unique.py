"""Store the numeric suffix and enforce identifier uniqueness.

Revision ID: 002_identifier_unique
Revises: 001_baseline
Create Date: 2026-10-08

Backfills ``sequence`` from each identifier's trailing digits so the
sequence resolver can sort server-side without string ordering, then adds
the unique index that makes insert-time conflicts authoritative.

Fails if the legacy store already holds duplicate identifiers; run
``enrolctl check`` first to list them.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from enrolctl.domain.ids import parse_suffix

revision: str = "002_identifier_unique"
down_revision: str | None = "001_baseline"
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.add_column("enrollments", sa.Column("sequence", sa.Integer(), nullable=True))

    conn = op.get_bind()
    rows = conn.execute(sa.text("SELECT id, identifier FROM enrollments")).fetchall()
    for row in rows:
        conn.execute(
            sa.text("UPDATE enrollments SET sequence = :seq WHERE id = :id"),
            {"seq": parse_suffix(row.identifier), "id": row.id},
        )

    op.create_index("uq_enrollments_identifier", "enrollments", ["identifier"], unique=True)
    op.create_index(
        "ix_enrollments_cohort_sequence",
        "enrollments",
        ["cohort_type", "cohort_number", "sequence"],
    )


def downgrade() -> None:
    op.drop_index("ix_enrollments_cohort_sequence", table_name="enrollments")
    op.drop_index("uq_enrollments_identifier", table_name="enrollments")
    op.drop_column("enrollments", "sequence")
