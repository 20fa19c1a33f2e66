"""Collision guard — re-validate a candidate immediately before commit.

For each candidate the guard looks the identifier up in every cohort, then
inserts it. There are three outcomes:

- Free: insert. A successful insert is ``allocated``.
- Held by the same cohort: a concurrent attempt won the race. Bump the
  suffix and retry, up to ``max_retries`` times, then report a transient
  failure so the caller can restart the whole pipeline.
- Held by a different cohort: the sequence has run into identifiers that a
  closed or prior cohort already claimed. This is ``cohort_closed`` and it
  is terminal.

The lookup-then-insert pair is not atomic. The unique index on
``identifier`` is what guarantees uniqueness, and an insert conflict is
classified exactly like a lookup hit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from enrolctl.domain.outcomes import AllocationResult
from enrolctl.infrastructure.store import IdentifierConflict, StoreError

if TYPE_CHECKING:
    from enrolctl.domain.cohort import Cohort
    from enrolctl.domain.ids import EnrollmentId
    from enrolctl.infrastructure.store import RecordStore

log = structlog.get_logger(__name__)


class CollisionGuard:
    """Commit a candidate identifier or explain why it cannot be committed."""

    def __init__(self, store: RecordStore, *, max_retries: int = 1) -> None:
        if max_retries < 0:
            msg = f"max_retries must be non-negative, got {max_retries}"
            raise ValueError(msg)
        self._store = store
        self._max_retries = max_retries

    def commit_or_reject(
        self,
        candidate: EnrollmentId,
        cohort: Cohort,
        email: str,
        payload: dict[str, Any] | None = None,
    ) -> AllocationResult:
        current = candidate
        max_attempts = self._max_retries + 1

        for attempt in range(1, max_attempts + 1):
            identifier = str(current)
            try:
                owner = self._claim(identifier, cohort, email, payload)
            except StoreError as exc:
                log.error("collision.store_error", identifier=identifier, error=str(exc))
                return AllocationResult.transient_failure(
                    str(exc), cohort=cohort, attempts=attempt
                )

            if owner is None:
                return AllocationResult.allocated(identifier, cohort, attempts=attempt)

            if owner != cohort:
                log.warning(
                    "collision.cross_cohort",
                    identifier=identifier,
                    cohort=cohort.label,
                    owner=owner.label,
                )
                return AllocationResult.cohort_closed(
                    cohort, identifier=identifier, owner=owner, attempts=attempt
                )

            log.info("collision.same_cohort", identifier=identifier, attempt=attempt)
            current = current.next()

        return AllocationResult.transient_failure(
            f"Identifier still contended after {max_attempts} attempts",
            cohort=cohort,
            attempts=max_attempts,
        )

    def _claim(
        self,
        identifier: str,
        cohort: Cohort,
        email: str,
        payload: dict[str, Any] | None,
    ) -> Cohort | None:
        """Insert *identifier*. Returns None on commit, else the owning cohort."""
        existing = self._store.find_by_identifier(identifier)
        if existing is not None:
            return existing.cohort

        try:
            self._store.insert(identifier, cohort=cohort, email=email, payload=payload)
        except IdentifierConflict:
            log.info("collision.insert_conflict", identifier=identifier)
            existing = self._store.find_by_identifier(identifier)
            # Winner not yet visible: treat as same-cohort contention.
            return existing.cohort if existing is not None else cohort
        return None
