"""Allocator — orchestrates one allocation attempt.

State machine, single pass per attempt::

    Start -> CohortResolved -> (hint mismatch -> ConfigMismatch)
          -> DuplicateChecked (duplicate -> Duplicate)
          -> CandidateComputed -> CommitAttempted
             (ok -> Allocated | same-cohort collision -> bounded retry
              | cross-cohort -> CohortClosed | store error -> TransientFailure)

INVARIANT: ``allocate()`` never raises for store failures and never loops
unboundedly. Every path terminates in an :class:`AllocationOutcome`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from enrolctl.domain.outcomes import AllocationResult
from enrolctl.domain.records import normalize_email
from enrolctl.infrastructure.store import StoreError

if TYPE_CHECKING:
    from enrolctl.allocation.cohort_context import CohortContextResolver
    from enrolctl.allocation.collision import CollisionGuard
    from enrolctl.allocation.duplicates import DuplicateDetector
    from enrolctl.allocation.sequence import SequenceResolver

log = structlog.get_logger(__name__)


class Allocator:
    """Compose the pipeline stages into a single allocation decision."""

    def __init__(
        self,
        cohorts: CohortContextResolver,
        duplicates: DuplicateDetector,
        sequence: SequenceResolver,
        guard: CollisionGuard,
    ) -> None:
        self._cohorts = cohorts
        self._duplicates = duplicates
        self._sequence = sequence
        self._guard = guard

    def allocate(
        self,
        cohort_hint: str | None,
        submitter_email: str,
        payload: dict[str, Any] | None = None,
    ) -> AllocationResult:
        """Allocate an identifier for *submitter_email* in the active cohort.

        Args:
            cohort_hint: Cohort number the caller believes is active. A
                mismatch with the resolved cohort fails fast. None skips
                the check.
            submitter_email: Submitter identity; compared case-insensitively.
            payload: Opaque applicant fields stored with the record.
        """
        email = normalize_email(submitter_email)

        # Captured once; later stages never re-read configuration.
        context = self._cohorts.resolve()
        cohort = context.cohort
        bound = log.bind(cohort=cohort.label, source=str(context.source))

        if cohort_hint is not None and cohort_hint.strip() != cohort.cohort_number:
            bound.warning("allocate.config_mismatch", hint=cohort_hint)
            return AllocationResult.config_mismatch(cohort, cohort_hint)

        try:
            existing = self._duplicates.find_existing(cohort, email)
        except StoreError as exc:
            return AllocationResult.transient_failure(
                f"Duplicate check unavailable: {exc}", cohort=cohort
            )
        if existing is not None:
            bound.info("allocate.duplicate", identifier=existing)
            return AllocationResult.duplicate(existing, cohort)

        try:
            candidate = self._sequence.next_candidate(cohort, context.starting_number)
        except StoreError as exc:
            bound.error("allocate.sequence_failed", error=str(exc))
            return AllocationResult.transient_failure(
                f"Sequence unavailable: {exc}", cohort=cohort
            )

        result = self._guard.commit_or_reject(candidate, cohort, email, payload)
        bound.info(
            "allocate.done",
            outcome=str(result.outcome),
            identifier=result.identifier,
            attempts=result.attempts,
        )
        return result
