"""Rich Console factory and theme for enrolctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ENROL_THEME = Theme(
    {
        "enrol.ok": "bold green",
        "enrol.error": "bold red",
        "enrol.warning": "bold yellow",
        "enrol.op": "bold cyan",
        "enrol.key": "dim",
        "enrol.id": "bold blue",
        "enrol.path": "dim",
        "enrol.email": "bold",
        "enrol.outcome.allocated": "green",
        "enrol.outcome.duplicate": "yellow",
        "enrol.outcome.failed": "red",
    }
)

_OUTCOME_STYLES: dict[str, str] = {
    "allocated": "enrol.outcome.allocated",
    "duplicate": "enrol.outcome.duplicate",
    "config_mismatch": "enrol.outcome.failed",
    "cohort_closed": "enrol.outcome.failed",
    "transient_failure": "enrol.outcome.failed",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=ENROL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_outcome(outcome: str) -> str:
    """Return the Rich style name for an allocation outcome."""
    return _OUTCOME_STYLES.get(outcome, "")
