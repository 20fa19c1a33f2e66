"""Command group: read-only enrollment lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enrolctl.commands._base import EnrolGroup
from enrolctl.services.registry import RegistryService

if TYPE_CHECKING:
    from enrolctl.commands._context import AppContext

_QUERY_EXAMPLES = """\
  enrolctl query get 25MBY2501
  enrolctl query list
  enrolctl query list --type Placement --number 1.0
  enrolctl query lookup ada@example.com
  enrolctl -q query list"""


@click.group(cls=EnrolGroup, examples=_QUERY_EXAMPLES)
@click.pass_obj
def query(app: AppContext) -> None:
    """Look up committed enrollments."""


@query.command(
    examples="""\
  enrolctl query get 25MBY2501
  enrolctl --json query get 25MBY2501"""
)
@click.argument("identifier")
@click.pass_obj
def get(app: AppContext, identifier: str) -> None:
    """Show the enrollment holding IDENTIFIER."""
    app.emit(RegistryService(app.workspace).get(identifier))


@query.command(
    "list",
    examples="""\
  enrolctl query list
  enrolctl query list --type Placement --number 1.0
  enrolctl -v query list""",
)
@click.option("--type", "cohort_type", default=None, help="Cohort type (default: configured).")
@click.option(
    "--number", "cohort_number", default=None, help="Cohort number (default: configured)."
)
@click.pass_obj
def list_cmd(app: AppContext, cohort_type: str | None, cohort_number: str | None) -> None:
    """List a cohort's enrollments in allocation order."""
    app.emit(RegistryService(app.workspace).list_cohort(cohort_type, cohort_number))


@query.command(
    examples="""\
  enrolctl query lookup ada@example.com"""
)
@click.argument("email")
@click.pass_obj
def lookup(app: AppContext, email: str) -> None:
    """Show every enrollment held by EMAIL across cohorts."""
    app.emit(RegistryService(app.workspace).lookup(email))
