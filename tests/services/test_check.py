"""Tests for CheckService integrity audit."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import text

from enrolctl.domain.cohort import Cohort
from enrolctl.domain.records import EnrollmentRecord
from enrolctl.infrastructure.workspace import Workspace
from enrolctl.services.check import (
    BACKUP_MAX_COUNT,
    CAT_FRONTIER,
    CAT_IDENTIFIER,
    CAT_SEQUENCE,
    CAT_SUBMITTER,
    CheckService,
)

OLD = Cohort(cohort_type="Placement", cohort_number="1.0")
NEW = Cohort(cohort_type="Placement", cohort_number="2.0")

Seed = Callable[..., EnrollmentRecord]


def _categories(issues: list[dict[str, Any]]) -> set[tuple[str, str]]:
    return {(i["category"], i["severity"]) for i in issues}


class TestCheck:
    def test_clean_store(self, workspace: Workspace, seed: Seed) -> None:
        seed("25MBY2501")
        seed("25MBY2502")
        result = CheckService(workspace).check()
        assert result.ok
        assert result.data["count"] == 0
        assert result.data["records"] == 2

    def test_gap_is_warning(self, workspace: Workspace, seed: Seed) -> None:
        seed("25MBY2501")
        seed("25MBY2504")
        issues = CheckService(workspace).check().data["issues"]
        assert _categories(issues) == {(CAT_SEQUENCE, "warning")}
        assert "2501 and 2504" in issues[0]["message"]

    def test_malformed_identifier(self, workspace: Workspace, seed: Seed) -> None:
        seed("MBY-legacy")
        issues = CheckService(workspace).check().data["issues"]
        assert (CAT_IDENTIFIER, "warning") in _categories(issues)

    def test_duplicate_submitter(self, workspace: Workspace, seed: Seed) -> None:
        seed("25MBY2501", NEW, "ada@example.com")
        seed("25MBY2502", NEW, "ada@example.com")
        issues = CheckService(workspace).check().data["issues"]
        submitter = [i for i in issues if i["category"] == CAT_SUBMITTER]
        assert len(submitter) == 1
        assert submitter[0]["severity"] == "error"
        assert submitter[0]["cohort"] == "Placement-2.0"

    def test_same_email_in_two_cohorts_is_fine(self, workspace: Workspace, seed: Seed) -> None:
        seed("24MBY0100", OLD, "ada@example.com")
        seed("25MBY2501", NEW, "ada@example.com")
        issues = CheckService(workspace).check().data["issues"]
        assert not [i for i in issues if i["category"] == CAT_SUBMITTER]

    def test_sequence_mismatch_and_missing(self, workspace: Workspace, seed: Seed) -> None:
        seed("25MBY2501")
        seed("25MBY2502")
        with workspace.engine.begin() as conn:
            conn.execute(
                text("UPDATE enrollments SET sequence = 7 WHERE identifier = '25MBY2501'")
            )
            conn.execute(
                text("UPDATE enrollments SET sequence = NULL WHERE identifier = '25MBY2502'")
            )
        issues = CheckService(workspace).check().data["issues"]
        messages = [i["message"] for i in issues if i["category"] == CAT_IDENTIFIER]
        assert any("disagrees" in m for m in messages)
        assert any("Missing stored sequence" in m for m in messages)

    def test_frontier_warning(self, workspace: Workspace, seed: Seed) -> None:
        seed("24MBY0100", OLD)
        workspace.config_source.set_active_cohort(NEW, 2501)
        issues = CheckService(workspace).check().data["issues"]
        frontier = [i for i in issues if i["category"] == CAT_FRONTIER]
        assert len(frontier) == 1
        assert frontier[0]["severity"] == "warning"

    def test_no_frontier_warning_when_overlapping(self, workspace: Workspace, seed: Seed) -> None:
        seed("25MBY2600", OLD)
        workspace.config_source.set_active_cohort(NEW, 2501)
        issues = CheckService(workspace).check().data["issues"]
        assert not [i for i in issues if i["category"] == CAT_FRONTIER]

    def test_no_frontier_warning_when_contiguous(
        self, workspace: Workspace, seed: Seed
    ) -> None:
        seed("25MBY2500", OLD)
        workspace.config_source.set_active_cohort(NEW, 2501)
        issues = CheckService(workspace).check().data["issues"]
        assert not [i for i in issues if i["category"] == CAT_FRONTIER]

    def test_min_severity_error(self, workspace: Workspace, seed: Seed) -> None:
        seed("25MBY2501", NEW, "ada@example.com")
        seed("25MBY2509", NEW, "ada@example.com")
        issues = CheckService(workspace).check(min_severity="error").data["issues"]
        assert _categories(issues) == {(CAT_SUBMITTER, "error")}


class TestBackup:
    def test_backup_copies_store(self, workspace: Workspace) -> None:
        path = CheckService(workspace).backup_db()
        assert path.is_file()
        assert path.parent == workspace.db_path.parent / "backups"

    def test_backups_are_pruned(self, workspace: Workspace) -> None:
        svc = CheckService(workspace)
        for _ in range(BACKUP_MAX_COUNT + 3):
            svc.backup_db()
        backups = list((workspace.db_path.parent / "backups").glob("*.db"))
        assert len(backups) == BACKUP_MAX_COUNT
