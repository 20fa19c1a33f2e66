"""AllocateService — the submission entry point.

Validates the submitter email, runs the allocator, and maps its outcome
onto the ServiceResult contract:

==================  =====  ===================
outcome             ok     error code
==================  =====  ===================
allocated           True   -
duplicate           True   - (warning)
config_mismatch     False  CONFIG_MISMATCH
cohort_closed       False  COHORT_CLOSED
transient_failure   False  TRANSIENT_FAILURE
==================  =====  ===================
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING, Any

from enrolctl.allocation import (
    Allocator,
    CohortContextResolver,
    CollisionGuard,
    DuplicateDetector,
    SequenceResolver,
)
from enrolctl.allocation.sequence import utc_today
from enrolctl.domain.outcomes import AllocationOutcome, AllocationResult
from enrolctl.domain.records import normalize_email
from enrolctl.services.base import BaseService
from enrolctl.services.result import ServiceResult

if TYPE_CHECKING:
    from enrolctl.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_FLAGGED_OUTCOMES = (AllocationOutcome.ALLOCATED, AllocationOutcome.DUPLICATE)

_FAILURE_CODES: dict[AllocationOutcome, str] = {
    AllocationOutcome.CONFIG_MISMATCH: "CONFIG_MISMATCH",
    AllocationOutcome.COHORT_CLOSED: "COHORT_CLOSED",
    AllocationOutcome.TRANSIENT_FAILURE: "TRANSIENT_FAILURE",
}


def build_allocator(workspace: Workspace, *, clock: Callable[[], date] = utc_today) -> Allocator:
    """Wire an Allocator from workspace collaborators and settings."""
    settings = workspace.settings
    return Allocator(
        cohorts=CohortContextResolver(workspace.config_source, settings.cohort),
        duplicates=DuplicateDetector(
            workspace.store, policy=settings.allocation.duplicate_policy
        ),
        sequence=SequenceResolver(
            workspace.store,
            marker=settings.identifier.marker,
            min_digits=settings.identifier.min_digits,
            clock=clock,
        ),
        guard=CollisionGuard(
            workspace.store, max_retries=settings.allocation.max_collision_retries
        ),
    )


def result_to_service(result: AllocationResult, email: str) -> ServiceResult:
    """Map an AllocationResult onto the ServiceResult contract."""
    op = "submit"
    data: dict[str, Any] = {
        "outcome": str(result.outcome),
        "email": email,
    }
    if result.identifier is not None:
        data["identifier"] = result.identifier
    if result.cohort is not None:
        data["cohort_type"] = result.cohort.cohort_type
        data["cohort_number"] = result.cohort.cohort_number
    meta = {"attempts": result.attempts} if result.attempts else None

    if result.outcome is AllocationOutcome.ALLOCATED:
        return ServiceResult(ok=True, op=op, data=data, meta=meta)

    if result.outcome is AllocationOutcome.DUPLICATE:
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=[f"Already enrolled in this cohort as {result.identifier}"],
        )

    messages = {
        AllocationOutcome.CONFIG_MISMATCH: (
            "Cohort mismatch; check the cohort number and contact the organizers"
        ),
        AllocationOutcome.COHORT_CLOSED: "Enrollment period for this cohort has ended",
        AllocationOutcome.TRANSIENT_FAILURE: "Enrollment temporarily unavailable; please retry",
    }
    return ServiceResult.failure(
        op,
        _FAILURE_CODES[result.outcome],
        messages[result.outcome],
        detail={
            "cause": result.cause,
            "retryable": result.retryable,
            "attempts": result.attempts,
        },
        data=data,
    )


class AllocateService(BaseService):
    """Run allocation attempts against the workspace store."""

    def __init__(self, workspace: Workspace, *, allocator: Allocator | None = None) -> None:
        super().__init__(workspace)
        self._allocator = allocator or build_allocator(workspace)

    def submit(
        self,
        submitter_email: str,
        *,
        cohort_hint: str | None,
        payload: dict[str, Any] | None = None,
        force: bool = False,
    ) -> ServiceResult:
        """Allocate an identifier for one submission.

        A submission flag recorded earlier for the same cohort hint and email
        short-circuits the allocator unless *force* is set. Terminal
        ``allocated`` and ``duplicate`` outcomes refresh the flag.
        """
        email = normalize_email(submitter_email)
        if not _EMAIL_RE.match(email):
            return ServiceResult.failure(
                "submit",
                "INVALID_EMAIL",
                f"Not a valid email address: {submitter_email!r}",
            )

        flag_key = cohort_hint.strip() if cohort_hint else None
        flags = self._workspace.flags
        if flag_key and not force:
            flag = flags.get(flag_key, email)
            if flag is not None:
                logger.info("Submission flag hit for %s in cohort %s", email, flag_key)
                return ServiceResult(
                    ok=True,
                    op="submit",
                    data={
                        "outcome": flag.outcome,
                        "email": email,
                        "identifier": flag.identifier,
                        "cohort_number": flag_key,
                        "flagged": True,
                    },
                    warnings=[
                        f"Already submitted from this device as {flag.identifier}; "
                        "use --force to submit again"
                    ],
                )

        result = self._allocator.allocate(cohort_hint, email, payload)
        if flag_key and result.outcome in _FLAGGED_OUTCOMES and result.identifier:
            try:
                flags.record(flag_key, email, result.identifier, str(result.outcome))
            except OSError:
                logger.warning("Could not record submission flag at %s", flags.path, exc_info=True)
        return result_to_service(result, email)
