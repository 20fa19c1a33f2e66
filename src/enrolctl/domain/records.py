"""EnrollmentRecord — one accepted submission.

INVARIANT: Records are created exactly once per accepted submission and are
never mutated or deleted by the allocator.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from enrolctl.domain.cohort import Cohort


def normalize_email(email: str) -> str:
    """Canonical submitter identity: trimmed and lower-cased."""
    return email.strip().lower()


class EnrollmentRecord(BaseModel):
    """A committed enrollment row."""

    model_config = {"frozen": True}

    identifier: str
    submitter_email: str
    cohort: Cohort
    payload: dict[str, Any] = Field(default_factory=dict)
    sequence: int | None = None
    created: str = ""

    def summary(self) -> dict[str, Any]:
        """Flat dict for service payloads (payload omitted)."""
        return {
            "identifier": self.identifier,
            "email": self.submitter_email,
            "cohort_type": self.cohort.cohort_type,
            "cohort_number": self.cohort.cohort_number,
            "sequence": self.sequence,
            "created": self.created,
        }
