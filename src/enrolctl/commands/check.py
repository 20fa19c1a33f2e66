"""Command: store integrity audit."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enrolctl.commands._base import EnrolCommand

if TYPE_CHECKING:
    from enrolctl.commands._context import AppContext


@click.command(
    cls=EnrolCommand,
    examples="""\
  enrolctl check
  enrolctl check --errors-only
  enrolctl --json check --min-severity error""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.pass_obj
def check(app: AppContext, min_severity: str, errors_only: bool) -> None:
    """Audit identifiers, sequences, and submitters in the store."""
    from enrolctl.services.check import CheckService

    threshold = "error" if errors_only else min_severity
    app.emit(CheckService(app.workspace).check(min_severity=threshold))
