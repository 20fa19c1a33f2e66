"""Pure domain types: cohorts, identifiers, records, and allocation outcomes."""

from enrolctl.domain.cohort import Cohort, CohortContext, ContextSource
from enrolctl.domain.ids import EnrollmentId, format_identifier, parse_suffix, validate_identifier
from enrolctl.domain.outcomes import AllocationOutcome, AllocationResult
from enrolctl.domain.records import EnrollmentRecord, normalize_email

__all__ = [
    "AllocationOutcome",
    "AllocationResult",
    "Cohort",
    "CohortContext",
    "ContextSource",
    "EnrollmentId",
    "EnrollmentRecord",
    "format_identifier",
    "normalize_email",
    "parse_suffix",
    "validate_identifier",
]
