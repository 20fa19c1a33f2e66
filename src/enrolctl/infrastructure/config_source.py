"""CohortConfigSource — the active cohort as recorded in the store.

Operators keep a single row in ``enrollment_config``. Reads may fail or
return nothing; the fallback decision belongs to the caller
(:class:`~enrolctl.allocation.cohort_context.CohortContextResolver`).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from enrolctl.domain.cohort import Cohort, CohortContext, ContextSource
from enrolctl.infrastructure.database.schema import enrollment_config
from enrolctl.infrastructure.store import StoreError

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class InvalidConfigRow(StoreError):
    """The config row was read but holds values no cohort can have."""


class CohortConfigSource:
    """Reads and writes the active cohort row."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_active_cohort(self) -> CohortContext | None:
        """Return the configured cohort, or None when no row exists.

        Raises:
            InvalidConfigRow: the stored row failed validation.
            StoreError: the config table could not be read.
        """
        stmt = select(enrollment_config).order_by(enrollment_config.c.id).limit(1)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as exc:
            msg = f"Could not read enrollment config: {exc}"
            raise StoreError(msg) from exc

        if row is None:
            return None
        try:
            return CohortContext(
                cohort=Cohort(cohort_type=row.cohort_type, cohort_number=row.cohort_number),
                starting_number=row.starting_enrollment_number,
                source=ContextSource.STORE,
            )
        except ValidationError as exc:
            msg = f"Invalid enrollment config row {row.id}: {exc.error_count()} bad field(s)"
            raise InvalidConfigRow(msg) from exc

    def set_active_cohort(self, cohort: Cohort, starting_number: int) -> CohortContext:
        """Replace the config row with *cohort* starting at *starting_number*."""
        if starting_number < 0:
            msg = f"Starting number must be non-negative, got {starting_number}"
            raise ValueError(msg)
        try:
            with self._engine.begin() as conn:
                conn.execute(delete(enrollment_config))
                conn.execute(
                    insert(enrollment_config).values(
                        cohort_type=cohort.cohort_type,
                        cohort_number=cohort.cohort_number,
                        starting_enrollment_number=starting_number,
                        updated=datetime.now(UTC).isoformat(),
                    )
                )
        except SQLAlchemyError as exc:
            msg = f"Could not write enrollment config: {exc}"
            raise StoreError(msg) from exc
        return CohortContext(cohort=cohort, starting_number=starting_number)
