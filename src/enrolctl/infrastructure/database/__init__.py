"""SQLite engine, schema, and migrations via SQLAlchemy Core and Alembic."""

from enrolctl.infrastructure.database.engine import create_db_engine, init_database
from enrolctl.infrastructure.database.schema import enrollment_config, enrollments, metadata

__all__ = [
    "create_db_engine",
    "enrollment_config",
    "enrollments",
    "init_database",
    "metadata",
]
