"""Tests for FlagsService."""

from __future__ import annotations

from enrolctl.infrastructure.workspace import Workspace
from enrolctl.services.flags import FlagsService


class TestFlagsService:
    def test_show_empty(self, workspace: Workspace) -> None:
        result = FlagsService(workspace).show()
        assert result.ok
        assert result.data["count"] == 0
        assert result.data["path"] == str(workspace.settings.flags_path)

    def test_show_lists_flags(self, workspace: Workspace) -> None:
        workspace.flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        items = FlagsService(workspace).show().data["items"]
        assert len(items) == 1
        assert items[0]["cohort_number"] == "2.0"
        assert items[0]["identifier"] == "25MBY2501"
        assert items[0]["email"] == "ada@example.com"

    def test_clear(self, workspace: Workspace) -> None:
        workspace.flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        workspace.flags.record("1.0", "ada@example.com", "24MBY0100", "allocated")
        result = FlagsService(workspace).clear(" 2.0 ")
        assert result.data["cleared"] == 1
        assert FlagsService(workspace).clear().data["cleared"] == 1
