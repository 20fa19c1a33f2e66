"""Alembic entry point for enrollment store revisions.

Loaded by Alembic with the :class:`~alembic.config.Config` built in
:func:`enrolctl.infrastructure.database.migrations.build_config`. Online
runs open the store through :func:`create_db_engine` so migrations see the
same WAL journal and busy timeout as allocation does.
"""

from __future__ import annotations

from pathlib import Path

from alembic import context
from sqlalchemy.engine import make_url

from enrolctl.infrastructure.database.engine import create_db_engine
from enrolctl.infrastructure.database.schema import metadata


def _store_url() -> str:
    url = context.config.get_main_option("sqlalchemy.url")
    if not url:
        msg = "Alembic config has no sqlalchemy.url; build it with build_config()"
        raise RuntimeError(msg)
    return url


def run_offline() -> None:
    """Print the revision SQL instead of executing it."""
    context.configure(
        url=_store_url(),
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    db_file = make_url(_store_url()).database
    engine = create_db_engine(Path(db_file or ":memory:"))
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, target_metadata=metadata)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
