"""Allocation outcome taxonomy.

Every allocation attempt terminates in exactly one of these outcomes.
Nothing else escapes the allocator.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from enrolctl.domain.cohort import Cohort


class AllocationOutcome(StrEnum):
    """Terminal states of the allocator."""

    ALLOCATED = "allocated"
    DUPLICATE = "duplicate"
    CONFIG_MISMATCH = "config_mismatch"
    COHORT_CLOSED = "cohort_closed"
    TRANSIENT_FAILURE = "transient_failure"


class AllocationResult(BaseModel):
    """Result of one allocation attempt.

    Attributes:
        outcome: Terminal state reached.
        identifier: New identifier (allocated) or existing one (duplicate).
        cohort: The cohort context the attempt ran under, if resolved.
        cause: Human-readable reason for non-allocated outcomes.
        attempts: Commit attempts made by the collision guard.
    """

    model_config = {"frozen": True}

    outcome: AllocationOutcome
    identifier: str | None = None
    cohort: Cohort | None = None
    cause: str | None = None
    attempts: int = 0

    @property
    def retryable(self) -> bool:
        return self.outcome is AllocationOutcome.TRANSIENT_FAILURE

    @property
    def accepted(self) -> bool:
        """True for outcomes that mark the submitter as enrolled."""
        return self.outcome in (AllocationOutcome.ALLOCATED, AllocationOutcome.DUPLICATE)

    @classmethod
    def allocated(cls, identifier: str, cohort: Cohort, *, attempts: int = 1) -> AllocationResult:
        return cls(
            outcome=AllocationOutcome.ALLOCATED,
            identifier=identifier,
            cohort=cohort,
            attempts=attempts,
        )

    @classmethod
    def duplicate(cls, identifier: str, cohort: Cohort) -> AllocationResult:
        return cls(outcome=AllocationOutcome.DUPLICATE, identifier=identifier, cohort=cohort)

    @classmethod
    def config_mismatch(cls, cohort: Cohort, hint: str) -> AllocationResult:
        return cls(
            outcome=AllocationOutcome.CONFIG_MISMATCH,
            cohort=cohort,
            cause=(
                f"Cohort number {hint!r} does not match the active cohort "
                f"{cohort.cohort_number!r}"
            ),
        )

    @classmethod
    def cohort_closed(
        cls, cohort: Cohort, *, identifier: str, owner: Cohort, attempts: int
    ) -> AllocationResult:
        return cls(
            outcome=AllocationOutcome.COHORT_CLOSED,
            cohort=cohort,
            cause=f"Identifier {identifier} already belongs to cohort {owner.label}",
            attempts=attempts,
        )

    @classmethod
    def transient_failure(
        cls, cause: str, *, cohort: Cohort | None = None, attempts: int = 0
    ) -> AllocationResult:
        return cls(
            outcome=AllocationOutcome.TRANSIENT_FAILURE,
            cohort=cohort,
            cause=cause,
            attempts=attempts,
        )
