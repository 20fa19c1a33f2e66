"""Entry point for the ``enrolctl`` console script."""

from __future__ import annotations

import click

from enrolctl import __version__
from enrolctl.commands import register_commands
from enrolctl.commands._base import EnrolGroup
from enrolctl.commands._context import AppContext
from enrolctl.config.settings import EnrolSettings


@click.group(
    cls=EnrolGroup,
    invoke_without_command=True,
    examples="""\
  enrolctl init
  enrolctl submit ada@example.com --cohort 2.0
  enrolctl --json query lookup ada@example.com
  enrolctl -c ./staging.toml cohort show""",
)
@click.version_option(version=__version__, prog_name="enrolctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only identifiers and errors.")
@click.option("-v", "--verbose", is_flag=True, help="Show record details and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Read settings from this TOML file instead of .enrolctl/config.toml.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Hand out cohort enrollment identifiers such as 25MBY2501.

    Each submission ends as allocated, duplicate, cohort_closed,
    transient_failure or config_mismatch.
    """
    settings = EnrolSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
