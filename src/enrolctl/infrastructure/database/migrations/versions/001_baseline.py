"""Baseline schema — the legacy onboarding store.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-01

Mirrors the store as it existed before identifier uniqueness was enforced:
no ``sequence`` column and no unique index on ``identifier``. Legacy stores
are stamped at this revision by ``enrolctl upgrade`` and then migrated.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("identifier", sa.Text, nullable=False),
        sa.Column("submitter_email", sa.Text, nullable=False),
        sa.Column("cohort_type", sa.Text, nullable=False),
        sa.Column("cohort_number", sa.Text, nullable=False),
        sa.Column("payload", sa.Text),
        sa.Column("created", sa.Text, nullable=False),
    )
    op.create_index(
        "ix_enrollments_submitter",
        "enrollments",
        ["submitter_email", "cohort_type", "cohort_number"],
    )

    op.create_table(
        "enrollment_config",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("cohort_type", sa.Text, nullable=False),
        sa.Column("cohort_number", sa.Text, nullable=False),
        sa.Column("starting_enrollment_number", sa.Integer, nullable=False),
        sa.Column("updated", sa.Text, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("enrollment_config")
    op.drop_index("ix_enrollments_submitter", table_name="enrollments")
    op.drop_table("enrollments")
