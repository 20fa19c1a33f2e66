"""Tests for the submit command."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
from click.testing import CliRunner

from enrolctl.cli import cli

_ID_2501 = re.compile(r"^\d{2}MBY2501$")


def _submit(runner: CliRunner, *args: str) -> dict:
    result = runner.invoke(cli, ["--json", "submit", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.mark.usefixtures("_isolated_workspace")
class TestSubmitCommand:
    def test_allocates_first_identifier(self, cli_runner: CliRunner) -> None:
        out = _submit(cli_runner, "ada@example.com", "--cohort", "2.0")
        assert out["ok"] is True
        assert out["data"]["outcome"] == "allocated"
        assert _ID_2501.match(out["data"]["identifier"])
        assert out["data"]["cohort_type"] == "Placement"

    def test_consecutive_submitters(self, cli_runner: CliRunner) -> None:
        _submit(cli_runner, "ada@example.com", "--cohort", "2.0")
        out = _submit(cli_runner, "grace@example.com", "--cohort", "2.0")
        assert out["data"]["identifier"].endswith("MBY2502")

    def test_payload_is_stored(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        answers = tmp_path / "answers.json"
        answers.write_text(json.dumps({"city": "Pune", "track": "frontend"}))
        out = _submit(
            cli_runner,
            "ada@example.com",
            "--cohort",
            "2.0",
            "--name",
            "Ada",
            "--field",
            "track=backend",
            "--payload-file",
            str(answers),
        )
        got = cli_runner.invoke(cli, ["--json", "query", "get", out["data"]["identifier"]])
        payload = json.loads(got.stdout)["data"]["payload"]
        assert payload == {"city": "Pune", "track": "backend", "name": "Ada"}

    def test_resubmit_hits_flag(self, cli_runner: CliRunner) -> None:
        first = _submit(cli_runner, "ada@example.com", "--cohort", "2.0")
        again = _submit(cli_runner, "ADA@example.com ", "--cohort", "2.0")
        assert again["data"]["flagged"] is True
        assert again["data"]["identifier"] == first["data"]["identifier"]
        assert "--force" in again["warnings"][0]

    def test_force_reaches_duplicate_detector(self, cli_runner: CliRunner) -> None:
        first = _submit(cli_runner, "ada@example.com", "--cohort", "2.0")
        again = _submit(cli_runner, "ada@example.com", "--cohort", "2.0", "--force")
        assert again["data"]["outcome"] == "duplicate"
        assert again["data"]["identifier"] == first["data"]["identifier"]
        assert "flagged" not in again["data"]

    def test_quiet_prints_identifier_only(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "submit", "ada@example.com", "--cohort", "2.0"])
        assert result.exit_code == 0
        assert _ID_2501.match(result.stdout.strip())

    def test_warning_goes_to_stderr(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["submit", "ada@example.com", "--cohort", "2.0"])
        result = cli_runner.invoke(cli, ["submit", "ada@example.com", "--cohort", "2.0"])
        assert result.exit_code == 0
        assert "WARNING: Already submitted" in result.stderr
        assert "WARNING" not in result.stdout


@pytest.mark.usefixtures("_isolated_workspace")
class TestSubmitFailures:
    def test_cohort_mismatch(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "submit", "ada@example.com", "--cohort", "9.9"]
        )
        assert result.exit_code == 1
        assert result.stdout == ""
        err = json.loads(result.stderr)
        assert err["error"]["code"] == "CONFIG_MISMATCH"
        assert err["error"]["detail"]["retryable"] is False

    def test_mismatch_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["submit", "ada@example.com", "--cohort", "9.9"])
        assert result.exit_code == 1
        assert "Cohort mismatch" in result.stderr

    def test_invalid_email(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "submit", "not-an-email", "--cohort", "2.0"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_EMAIL"

    def test_bad_field_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["submit", "ada@example.com", "--cohort", "2.0", "--field", "novalue"]
        )
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.stderr

    def test_payload_must_be_object(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2]")
        result = cli_runner.invoke(
            cli,
            ["--json", "submit", "ada@example.com", "--cohort", "2.0", "--payload-file", str(bad)],
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_PAYLOAD"

    def test_cohort_is_required(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["submit", "ada@example.com"])
        assert result.exit_code == 2
