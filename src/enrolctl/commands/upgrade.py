"""``enrolctl upgrade``: bring an existing store's schema up to date."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enrolctl.commands._base import EnrolCommand

if TYPE_CHECKING:
    from enrolctl.commands._context import AppContext


@click.command(
    cls=EnrolCommand,
    examples="""\
  enrolctl upgrade
  enrolctl upgrade --check
  enrolctl upgrade --stamp
  enrolctl --json upgrade --check""",
)
@click.option("--check", "check_only", is_flag=True, help="List pending revisions only.")
@click.option(
    "--stamp",
    "stamp_only",
    is_flag=True,
    help="Record the revision an unversioned store already matches, without migrating.",
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool, stamp_only: bool) -> None:
    """Back up the store, then apply pending schema revisions."""
    if check_only and stamp_only:
        raise click.UsageError("--check and --stamp cannot be combined.")

    from enrolctl.services.upgrade import UpgradeService

    svc = UpgradeService(app.workspace)
    if check_only:
        app.emit(svc.check_pending())
    elif stamp_only:
        app.emit(svc.stamp_current())
    else:
        app.emit(svc.apply())
