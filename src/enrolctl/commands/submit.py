"""Command: submit an enrollment and allocate its identifier."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from enrolctl.commands._base import EnrolCommand
from enrolctl.services.result import ServiceResult

if TYPE_CHECKING:
    from enrolctl.commands._context import AppContext

_SUBMIT_EXAMPLES = """\
  enrolctl submit ada@example.com --cohort 2.0
  enrolctl submit ada@example.com --cohort 2.0 --name "Ada Lovelace"
  enrolctl submit ada@example.com --cohort 2.0 --field track=backend --field city=Pune
  enrolctl submit ada@example.com --cohort 2.0 --payload-file answers.json
  enrolctl -q submit ada@example.com --cohort 2.0 --force"""


def _parse_fields(fields: tuple[str, ...]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for raw in fields:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint="--field")
        parsed[key.strip()] = value.strip()
    return parsed


@click.command(cls=EnrolCommand, examples=_SUBMIT_EXAMPLES)
@click.argument("email")
@click.option(
    "--cohort",
    "cohort_hint",
    required=True,
    help="Cohort number the submitter is enrolling for.",
)
@click.option("--name", default=None, help="Submitter's display name.")
@click.option("--field", "fields", multiple=True, help="Extra KEY=VALUE payload field.")
@click.option(
    "--payload-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON object merged into the payload.",
)
@click.option("--force", is_flag=True, help="Ignore the local submission flag.")
@click.pass_obj
def submit(
    app: AppContext,
    email: str,
    cohort_hint: str,
    name: str | None,
    fields: tuple[str, ...],
    payload_file: str | None,
    force: bool,
) -> None:
    """Enroll EMAIL in the active cohort and print its identifier.

    Resubmitting the same email returns the existing identifier.
    """
    payload: dict[str, Any] = {}
    if payload_file is not None:
        try:
            with open(payload_file, encoding="utf-8") as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            app.emit(
                ServiceResult.failure(
                    "submit", "INVALID_PAYLOAD", f"Error reading {payload_file}: {exc}"
                )
            )
            return
        if not isinstance(loaded, dict):
            app.emit(
                ServiceResult.failure(
                    "submit", "INVALID_PAYLOAD", "Payload file must contain a JSON object."
                )
            )
            return
        payload.update(loaded)

    payload.update(_parse_fields(fields))
    if name is not None:
        payload["name"] = name

    from enrolctl.services.allocate import AllocateService

    svc = AllocateService(app.workspace)
    app.emit(svc.submit(email, cohort_hint=cohort_hint, payload=payload or None, force=force))
