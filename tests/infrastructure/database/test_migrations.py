"""Tests for the Alembic migration chain."""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError

from enrolctl.infrastructure.database.migrations import build_config


def _url(path: Path) -> str:
    return f"sqlite:///{path}"


class TestMigrationChain:
    def test_head_is_identifier_unique(self, tmp_path: Path) -> None:
        script = ScriptDirectory.from_config(build_config(_url(tmp_path / "x.db")))
        assert script.get_current_head() == "002_identifier_unique"

    def test_upgrade_from_empty(self, tmp_path: Path) -> None:
        db = tmp_path / "fresh.db"
        command.upgrade(build_config(_url(db)), "head")
        engine = create_engine(_url(db))
        insp = inspect(engine)
        columns = {c["name"] for c in insp.get_columns("enrollments")}
        indexes = {ix["name"] for ix in insp.get_indexes("enrollments")}
        engine.dispose()
        assert "sequence" in columns
        assert "uq_enrollments_identifier" in indexes

    def test_baseline_backfills_sequence(self, tmp_path: Path) -> None:
        db = tmp_path / "legacy.db"
        cfg = build_config(_url(db))
        command.upgrade(cfg, "001_baseline")

        engine = create_engine(_url(db))
        with engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO enrollments "
                    "(identifier, submitter_email, cohort_type, cohort_number, created) "
                    "VALUES ('24MBY0042', 'a@example.com', 'Placement', '1.0', 'x'), "
                    "('garbage', 'b@example.com', 'Placement', '1.0', 'x')"
                )
            )
        command.upgrade(cfg, "head")
        with engine.connect() as conn:
            rows = dict(conn.execute(text("SELECT identifier, sequence FROM enrollments")).all())
        engine.dispose()
        assert rows == {"24MBY0042": 42, "garbage": 0}

    def test_upgrade_fails_on_duplicate_identifiers(self, tmp_path: Path) -> None:
        db = tmp_path / "dupes.db"
        cfg = build_config(_url(db))
        command.upgrade(cfg, "001_baseline")
        engine = create_engine(_url(db))
        with engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO enrollments "
                    "(identifier, submitter_email, cohort_type, cohort_number, created) "
                    "VALUES ('24MBY0042', 'a@example.com', 'Placement', '1.0', 'x'), "
                    "('24MBY0042', 'b@example.com', 'Placement', '2.0', 'x')"
                )
            )
        engine.dispose()
        with pytest.raises(IntegrityError, match="UNIQUE"):
            command.upgrade(cfg, "head")

    def test_downgrade_to_baseline(self, tmp_path: Path) -> None:
        db = tmp_path / "down.db"
        cfg = build_config(_url(db))
        command.upgrade(cfg, "head")
        command.downgrade(cfg, "001_baseline")
        engine = create_engine(_url(db))
        columns = {c["name"] for c in inspect(engine).get_columns("enrollments")}
        engine.dispose()
        assert "sequence" not in columns
