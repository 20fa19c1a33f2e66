"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest

from enrolctl.output.formatters import OutputSettings, format_result
from enrolctl.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="ERR", message=msg),
    )


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(AttributeError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        result = _ok("submit", identifier="25MBY2501")
        output = format_result(result, settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "submit"
        assert data["data"]["identifier"] == "25MBY2501"

    def test_json_mode_error(self) -> None:
        output = format_result(_err("submit", "Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        output = format_result(_ok("submit", identifier="25MBY2501"), settings=settings)
        assert json.loads(output)["op"] == "submit"


class TestFormatResultQuiet:
    def test_quiet_success(self) -> None:
        output = format_result(_ok("cohort_set"), settings=OutputSettings(quiet=True))
        assert output == "OK: cohort_set"

    def test_quiet_submit_prints_identifier(self) -> None:
        result = _ok("submit", identifier="25MBY2501", outcome="allocated")
        assert format_result(result, settings=OutputSettings(quiet=True)) == "25MBY2501"

    def test_quiet_error(self) -> None:
        output = format_result(_err("submit", "Bad input"), settings=OutputSettings(quiet=True))
        assert output == "ERROR: submit: Bad input"


class TestFormatResultDefault:
    def test_default_is_rich(self) -> None:
        output = format_result(_ok("unknown_op", key="val"))
        assert output.startswith("OK")
        assert "key: val" in output
