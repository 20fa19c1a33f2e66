"""Database engine setup for SQLite with WAL mode.

SQLite stands in for the remote record store. WAL mode lets concurrent
readers proceed while a writer commits; the busy timeout bounds how long
any single store call may block before it surfaces as an error.

SQLAlchemy Core (not ORM) is used: every store call is a short,
self-contained round trip with no session state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from enrolctl.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path, *, timeout: float = 5.0) -> Engine:
    """Create a SQLite engine with WAL mode and a busy timeout of *timeout* seconds."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": timeout, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(db_path: Path, *, timeout: float = 5.0) -> Engine:
    """Initialize the store at *db_path*.

    Creates the parent directory and any missing tables. Idempotent: an
    existing store keeps its schema (legacy stores are brought forward by
    ``enrolctl upgrade``, not here).
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, timeout=timeout)
    metadata.create_all(engine)
    return engine
