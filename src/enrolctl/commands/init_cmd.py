"""Command: workspace initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from enrolctl.commands._base import EnrolCommand

if TYPE_CHECKING:
    from enrolctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  enrolctl init
  enrolctl init /srv/enrollment --type Placement --number 2.0 --start 2501
  enrolctl init . --no-config"""


@click.command("init", cls=EnrolCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--type", "cohort_type", default=None, help="Active cohort type.")
@click.option("--number", "cohort_number", default=None, help="Active cohort number.")
@click.option(
    "--start",
    "starting_number",
    type=click.IntRange(min=0),
    default=None,
    help="First suffix for the active cohort.",
)
@click.option("--no-config", is_flag=True, help="Do not write enrolctl.toml.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    cohort_type: str | None,
    cohort_number: str | None,
    starting_number: int | None,
    no_config: bool,
) -> None:
    """Create the enrollment store under PATH.

    Passing both --type and --number also activates that cohort.
    """
    from enrolctl.config.settings import EnrolSettings
    from enrolctl.infrastructure.workspace import Workspace
    from enrolctl.services.init import InitService

    current = app.settings
    settings = EnrolSettings.from_cli(
        root=Path(path).resolve(),
        json_output=current.json_output,
        quiet=current.quiet,
        verbose=current.verbose,
        log_json=current.log_json,
    )
    workspace = Workspace(settings)
    try:
        result = InitService(workspace).init(
            cohort_type=cohort_type,
            cohort_number=cohort_number,
            starting_number=starting_number,
            write_config=not no_config,
        )
    finally:
        workspace.close()
    app.emit(result)
