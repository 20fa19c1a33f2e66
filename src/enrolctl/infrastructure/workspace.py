"""Workspace — the single dependency injected into every service.

Owns the SQLite engine and hands out the collaborators built on it: the
record store, the cohort config source, and the client submission flags.
Constructed lazily by the CLI so ``--help`` never touches the database.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from enrolctl.infrastructure.config_source import CohortConfigSource
from enrolctl.infrastructure.database.engine import init_database
from enrolctl.infrastructure.flags import SubmissionFlags
from enrolctl.infrastructure.store import RecordStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from enrolctl.config.settings import EnrolSettings

logger = logging.getLogger(__name__)


class Workspace:
    """Store, config source, and flags for one enrolctl root."""

    def __init__(self, settings: EnrolSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            settings.db_path, timeout=settings.store.timeout_seconds
        )
        self._store = RecordStore(self._engine)
        self._config_source = CohortConfigSource(self._engine)
        self._flags = SubmissionFlags(settings.flags_path)
        logger.debug("Workspace opened at %s", settings.db_path)

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def db_path(self) -> Path:
        return self._settings.db_path

    @property
    def settings(self) -> EnrolSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def config_source(self) -> CohortConfigSource:
        return self._config_source

    @property
    def flags(self) -> SubmissionFlags:
        return self._flags

    def close(self) -> None:
        """Dispose of pooled connections."""
        self._engine.dispose()
