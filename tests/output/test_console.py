"""Tests for the Rich console factory and theme."""

from io import StringIO

from enrolctl.output.console import ENROL_THEME, create_console, get_output, style_for_outcome


class TestCreateConsole:
    def test_writes_to_buffer(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_no_ansi_when_not_a_terminal(self) -> None:
        console = create_console()
        console.print("[enrol.ok]OK[/enrol.ok]")
        assert "\x1b[" not in get_output(console)

    def test_width_override(self) -> None:
        assert create_console(width=40).width == 40


class TestTheme:
    def test_enrol_styles_registered(self) -> None:
        for name in ("enrol.ok", "enrol.error", "enrol.id", "enrol.email"):
            assert name in ENROL_THEME.styles


class TestStyleForOutcome:
    def test_known_outcomes(self) -> None:
        assert style_for_outcome("allocated") == "enrol.outcome.allocated"
        assert style_for_outcome("duplicate") == "enrol.outcome.duplicate"
        assert style_for_outcome("transient_failure") == "enrol.outcome.failed"

    def test_unknown_outcome(self) -> None:
        assert style_for_outcome("mystery") == ""
