"""Command group: client-side submission flags."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enrolctl.commands._base import EnrolGroup
from enrolctl.services.flags import FlagsService

if TYPE_CHECKING:
    from enrolctl.commands._context import AppContext

_FLAGS_EXAMPLES = """\
  enrolctl flags show
  enrolctl flags clear --cohort 2.0
  enrolctl flags clear"""


@click.group(cls=EnrolGroup, examples=_FLAGS_EXAMPLES)
@click.pass_obj
def flags(app: AppContext) -> None:
    """Inspect or reset local submission flags."""


@flags.command(
    examples="""\
  enrolctl flags show
  enrolctl -v flags show"""
)
@click.pass_obj
def show(app: AppContext) -> None:
    """List recorded submission flags."""
    app.emit(FlagsService(app.workspace).show())


@flags.command(
    examples="""\
  enrolctl flags clear --cohort 2.0
  enrolctl flags clear"""
)
@click.option("--cohort", "cohort_number", default=None, help="Only clear this cohort's flags.")
@click.pass_obj
def clear(app: AppContext, cohort_number: str | None) -> None:
    """Remove submission flags so the next submit reaches the allocator."""
    app.emit(FlagsService(app.workspace).clear(cohort_number))
