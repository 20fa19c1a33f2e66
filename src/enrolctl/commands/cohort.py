"""Command group: inspect and switch the active cohort."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enrolctl.commands._base import EnrolGroup
from enrolctl.services.cohort import CohortService

if TYPE_CHECKING:
    from enrolctl.commands._context import AppContext

_COHORT_EXAMPLES = """\
  enrolctl cohort show
  enrolctl cohort set Placement 3.0 --start 2901
  enrolctl --json cohort show"""


@click.group(cls=EnrolGroup, examples=_COHORT_EXAMPLES)
@click.pass_obj
def cohort(app: AppContext) -> None:
    """Show or change the cohort new enrollments go to."""


@cohort.command(
    examples="""\
  enrolctl cohort show
  enrolctl --json cohort show"""
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Show the active cohort and where it was resolved from."""
    app.emit(CohortService(app.workspace).show())


@cohort.command(
    "set",
    examples="""\
  enrolctl cohort set Placement 3.0 --start 2901
  enrolctl cohort set Internship 1.0 --start 0""",
)
@click.argument("cohort_type")
@click.argument("cohort_number")
@click.option(
    "--start",
    "starting_number",
    type=click.IntRange(min=0),
    required=True,
    help="First suffix for the cohort's identifiers.",
)
@click.pass_obj
def set_cohort(
    app: AppContext, cohort_type: str, cohort_number: str, starting_number: int
) -> None:
    """Make COHORT_TYPE COHORT_NUMBER the active cohort."""
    app.emit(CohortService(app.workspace).set_active(cohort_type, cohort_number, starting_number))
