"""Subcommand modules for enrolctl.

Provides register_commands() which uses deferred imports to keep
``enrolctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    3 groups (have subcommands) + 4 standalone commands.
    """
    # --- Groups ---
    from enrolctl.commands.cohort import cohort
    from enrolctl.commands.flags import flags
    from enrolctl.commands.query import query

    cli.add_command(cohort)
    cli.add_command(query)
    cli.add_command(flags)

    # --- Standalone commands ---
    from enrolctl.commands.check import check
    from enrolctl.commands.init_cmd import init_cmd
    from enrolctl.commands.submit import submit
    from enrolctl.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(submit)
    cli.add_command(check)
    cli.add_command(upgrade)
