"""SQLAlchemy Core table definitions for the enrollment store.

``enrollments`` holds one row per accepted submission. The unique index on
``identifier`` is the authoritative collision signal; the allocator's
pre-insert lookup is only an optimization on top of it.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

enrollments = Table(
    "enrollments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("identifier", Text, nullable=False),
    Column("submitter_email", Text, nullable=False),
    Column("cohort_type", Text, nullable=False),
    Column("cohort_number", Text, nullable=False),
    Column("sequence", Integer),  # numeric suffix of identifier
    Column("payload", Text),  # JSON object
    Column("created", Text, nullable=False),
)

Index("uq_enrollments_identifier", enrollments.c.identifier, unique=True)
Index(
    "ix_enrollments_cohort_sequence",
    enrollments.c.cohort_type,
    enrollments.c.cohort_number,
    enrollments.c.sequence,
)
Index(
    "ix_enrollments_submitter",
    enrollments.c.submitter_email,
    enrollments.c.cohort_type,
    enrollments.c.cohort_number,
)

# Single-row table edited by operators; read once per allocation attempt.
enrollment_config = Table(
    "enrollment_config",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("cohort_type", Text, nullable=False),
    Column("cohort_number", Text, nullable=False),
    Column("starting_enrollment_number", Integer, nullable=False),
    Column("updated", Text, nullable=False),
)
