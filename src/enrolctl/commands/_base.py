"""Click command and group classes used by every enrolctl command.

Any command or group declared with an ``examples=`` block gains an eager
``--examples`` flag. It prints that block under the command path and exits
before the callback runs, so no workspace is opened.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Store an ``examples`` block and expose it through ``--examples``."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class EnrolCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class EnrolGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`EnrolCommand`."""

    command_class = EnrolCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
