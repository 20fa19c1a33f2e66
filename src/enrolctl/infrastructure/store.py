"""RecordStore — table-like access to enrollment records.

The store offers filtered reads, a descending sort with limit, full scans,
and insert. It deliberately offers no atomic increment and no multi-row
transaction: every method is one short, independent round trip.

All SQLAlchemy failures surface as :class:`StoreError` (the original error
is chained as ``__cause__``). A unique-index violation on insert surfaces
as :class:`IdentifierConflict`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from enrolctl.domain.cohort import Cohort
from enrolctl.domain.ids import parse_suffix
from enrolctl.domain.records import EnrollmentRecord
from enrolctl.infrastructure.database.schema import enrollments

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A store round trip failed (unreachable, timed out, rejected)."""


class IdentifierConflict(StoreError):
    """Insert rejected because the identifier is already taken."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Identifier already exists: {identifier}")
        self.identifier = identifier


def _row_to_record(row: Row[Any]) -> EnrollmentRecord:
    payload: dict[str, Any] = {}
    if row.payload:
        try:
            payload = json.loads(row.payload)
        except ValueError:
            logger.warning("Unreadable payload for %s", row.identifier)
    return EnrollmentRecord(
        identifier=row.identifier,
        submitter_email=row.submitter_email,
        cohort=Cohort(cohort_type=row.cohort_type, cohort_number=row.cohort_number),
        payload=payload,
        sequence=row.sequence,
        created=row.created,
    )


def _in_cohort(cohort: Cohort) -> tuple[Any, Any]:
    return (
        enrollments.c.cohort_type == cohort.cohort_type,
        enrollments.c.cohort_number == cohort.cohort_number,
    )


class RecordStore:
    """Enrollment records over a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except StoreError:
            raise
        except SQLAlchemyError as exc:
            msg = f"Store {operation} failed: {exc}"
            raise StoreError(msg) from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_submitter(self, cohort: Cohort, email: str) -> list[EnrollmentRecord]:
        """Records for *email* in exactly *cohort*, oldest suffix first."""
        stmt = (
            select(enrollments)
            .where(enrollments.c.submitter_email == email, *_in_cohort(cohort))
            .order_by(enrollments.c.sequence, enrollments.c.id)
        )
        with self._guard("find_by_submitter"), self._engine.connect() as conn:
            return [_row_to_record(r) for r in conn.execute(stmt)]

    def find_by_email(self, email: str) -> list[EnrollmentRecord]:
        """Records for *email* across every cohort."""
        stmt = (
            select(enrollments)
            .where(enrollments.c.submitter_email == email)
            .order_by(enrollments.c.id)
        )
        with self._guard("find_by_email"), self._engine.connect() as conn:
            return [_row_to_record(r) for r in conn.execute(stmt)]

    def find_by_identifier(self, identifier: str) -> EnrollmentRecord | None:
        """The record holding *identifier* in any cohort, if one exists."""
        stmt = select(enrollments).where(enrollments.c.identifier == identifier).limit(1)
        with self._guard("find_by_identifier"), self._engine.connect() as conn:
            row = conn.execute(stmt).first()
        return _row_to_record(row) if row is not None else None

    def highest_identifier(self, cohort: Cohort) -> str | None:
        """Identifier with the highest suffix in *cohort* (server-side sort, limit 1)."""
        stmt = (
            select(enrollments.c.identifier)
            .where(*_in_cohort(cohort), enrollments.c.sequence.is_not(None))
            .order_by(enrollments.c.sequence.desc())
            .limit(1)
        )
        with self._guard("highest_identifier"), self._engine.connect() as conn:
            row = conn.execute(stmt).first()
        return str(row.identifier) if row is not None else None

    def identifiers_for_cohort(self, cohort: Cohort) -> list[str]:
        """Every identifier in *cohort*, unordered."""
        stmt = select(enrollments.c.identifier).where(*_in_cohort(cohort))
        with self._guard("identifiers_for_cohort"), self._engine.connect() as conn:
            return [str(r.identifier) for r in conn.execute(stmt)]

    def list_cohort(self, cohort: Cohort) -> list[EnrollmentRecord]:
        """Records in *cohort* ordered by suffix."""
        stmt = (
            select(enrollments)
            .where(*_in_cohort(cohort))
            .order_by(enrollments.c.sequence, enrollments.c.id)
        )
        with self._guard("list_cohort"), self._engine.connect() as conn:
            return [_row_to_record(r) for r in conn.execute(stmt)]

    def list_all(self) -> list[EnrollmentRecord]:
        """Every record in insertion order."""
        stmt = select(enrollments).order_by(enrollments.c.id)
        with self._guard("list_all"), self._engine.connect() as conn:
            return [_row_to_record(r) for r in conn.execute(stmt)]

    def count_by_cohort(self) -> dict[Cohort, int]:
        stmt = select(
            enrollments.c.cohort_type,
            enrollments.c.cohort_number,
            func.count().label("n"),
        ).group_by(enrollments.c.cohort_type, enrollments.c.cohort_number)
        with self._guard("count_by_cohort"), self._engine.connect() as conn:
            return {
                Cohort(cohort_type=r.cohort_type, cohort_number=r.cohort_number): int(r.n)
                for r in conn.execute(stmt)
            }

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(
        self,
        identifier: str,
        *,
        cohort: Cohort,
        email: str,
        payload: dict[str, Any] | None = None,
    ) -> EnrollmentRecord:
        """Insert one record and return it as stored.

        Raises:
            IdentifierConflict: *identifier* is already taken.
            StoreError: any other store failure; nothing is persisted.
        """
        record = EnrollmentRecord(
            identifier=identifier,
            submitter_email=email,
            cohort=cohort,
            payload=payload or {},
            sequence=parse_suffix(identifier),
            created=datetime.now(UTC).isoformat(),
        )
        stmt = insert(enrollments).values(
            identifier=record.identifier,
            submitter_email=record.submitter_email,
            cohort_type=cohort.cohort_type,
            cohort_number=cohort.cohort_number,
            sequence=record.sequence,
            payload=json.dumps(record.payload, sort_keys=True),
            created=record.created,
        )
        with self._guard("insert"):
            try:
                with self._engine.begin() as conn:
                    conn.execute(stmt)
            except IntegrityError as exc:
                if "identifier" in str(exc.orig):
                    raise IdentifierConflict(identifier) from exc
                raise
        return record
