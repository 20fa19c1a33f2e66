"""Tests for the client-side submission flag file."""

from __future__ import annotations

from pathlib import Path

from enrolctl.infrastructure.flags import SubmissionFlags


class TestSubmissionFlags:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        flags = SubmissionFlags(tmp_path / "flags.json")
        assert flags.get("2.0", "ada@example.com") is None
        assert flags.all() == {}

    def test_record_and_get(self, tmp_path: Path) -> None:
        flags = SubmissionFlags(tmp_path / "nested" / "flags.json")
        flag = flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        assert flag.token.startswith("enrolctl_25MBY2501_")
        fetched = flags.get("2.0", "ada@example.com")
        assert fetched == flag
        assert flags.get("2.0", "bob@example.com") is None
        assert flags.get("1.0", "ada@example.com") is None

    def test_record_replaces(self, tmp_path: Path) -> None:
        flags = SubmissionFlags(tmp_path / "flags.json")
        flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        flags.record("2.0", "ada@example.com", "25MBY2501", "duplicate")
        fetched = flags.get("2.0", "ada@example.com")
        assert fetched is not None
        assert fetched.outcome == "duplicate"

    def test_all_groups_by_cohort(self, tmp_path: Path) -> None:
        flags = SubmissionFlags(tmp_path / "flags.json")
        flags.record("2.0", "bob@example.com", "25MBY2502", "allocated")
        flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        flags.record("1.0", "ada@example.com", "24MBY0100", "duplicate")
        grouped = flags.all()
        assert list(grouped) == ["1.0", "2.0"]
        assert [f.email for f in grouped["2.0"]] == ["ada@example.com", "bob@example.com"]

    def test_clear_one_cohort(self, tmp_path: Path) -> None:
        flags = SubmissionFlags(tmp_path / "flags.json")
        flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        flags.record("2.0", "bob@example.com", "25MBY2502", "allocated")
        flags.record("1.0", "ada@example.com", "24MBY0100", "allocated")
        assert flags.clear("2.0") == 2
        assert flags.get("2.0", "ada@example.com") is None
        assert flags.get("1.0", "ada@example.com") is not None

    def test_clear_all(self, tmp_path: Path) -> None:
        flags = SubmissionFlags(tmp_path / "flags.json")
        flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        flags.record("1.0", "ada@example.com", "24MBY0100", "allocated")
        assert flags.clear() == 2
        assert flags.all() == {}

    def test_corrupt_file_reads_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "flags.json"
        path.write_text("{not json", encoding="utf-8")
        flags = SubmissionFlags(path)
        assert flags.get("2.0", "ada@example.com") is None
        flags.record("2.0", "ada@example.com", "25MBY2501", "allocated")
        assert flags.get("2.0", "ada@example.com") is not None

    def test_malformed_entry_is_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "flags.json"
        path.write_text('{"2.0": {"ada@example.com": {"token": 1}}}', encoding="utf-8")
        assert SubmissionFlags(path).get("2.0", "ada@example.com") is None
