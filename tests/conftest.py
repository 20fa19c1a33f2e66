"""Shared pytest fixtures and test helpers for enrolctl tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from enrolctl.config.settings import EnrolSettings
from enrolctl.domain.cohort import Cohort
from enrolctl.domain.records import EnrollmentRecord
from enrolctl.infrastructure.database.engine import init_database
from enrolctl.infrastructure.store import RecordStore
from enrolctl.infrastructure.workspace import Workspace

PLACEMENT_1 = Cohort(cohort_type="Placement", cohort_number="1.0")
PLACEMENT_2 = Cohort(cohort_type="Placement", cohort_number="2.0")


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ENROLCTL_* environment out of the tests."""
    monkeypatch.delenv("ENROLCTL_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "test.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> EnrolSettings:
    return EnrolSettings.from_cli(root=tmp_path)


@pytest.fixture
def workspace(settings: EnrolSettings) -> Generator[Workspace]:
    """Workspace with a fresh store under a temp root."""
    ws = Workspace(settings)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def store(workspace: Workspace) -> RecordStore:
    return workspace.store


@pytest.fixture
def fixed_clock() -> Callable[[], date]:
    """Clock pinned to mid-2025 so identifiers carry the ``25`` prefix."""
    return lambda: date(2025, 6, 1)


@pytest.fixture
def seed(store: RecordStore) -> Callable[..., EnrollmentRecord]:
    """Insert a record directly, bypassing the allocator."""

    def _seed(
        identifier: str, cohort: Cohort = PLACEMENT_2, email: str | None = None
    ) -> EnrollmentRecord:
        return store.insert(
            identifier, cohort=cohort, email=email or f"{identifier.lower()}@example.com"
        )

    return _seed


@pytest.fixture
def _isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp root so the CLI creates an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
