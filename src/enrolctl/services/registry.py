"""RegistryService — read-only lookups over committed enrollments."""

from __future__ import annotations

from enrolctl.domain.cohort import Cohort
from enrolctl.domain.records import normalize_email
from enrolctl.infrastructure.store import StoreError
from enrolctl.services.base import BaseService
from enrolctl.services.result import ServiceResult


def _store_failure(op: str, exc: StoreError) -> ServiceResult:
    return ServiceResult.failure(op, "STORE_ERROR", str(exc), detail={"retryable": True})


class RegistryService(BaseService):
    """Query enrollment records by identifier, cohort, or email."""

    def get(self, identifier: str) -> ServiceResult:
        op = "get"
        try:
            record = self._workspace.store.find_by_identifier(identifier.strip())
        except StoreError as exc:
            return _store_failure(op, exc)
        if record is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"No enrollment with id {identifier}")

        data = record.summary()
        data["payload"] = record.payload
        return ServiceResult(ok=True, op=op, data=data)

    def list_cohort(
        self,
        cohort_type: str | None = None,
        cohort_number: str | None = None,
    ) -> ServiceResult:
        """List records in a cohort (default: the [cohort] section's cohort)."""
        op = "list_cohort"
        fallback = self._workspace.settings.cohort
        cohort = Cohort(
            cohort_type=cohort_type or fallback.cohort_type,
            cohort_number=cohort_number or fallback.cohort_number,
        )
        try:
            records = self._workspace.store.list_cohort(cohort)
        except StoreError as exc:
            return _store_failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "cohort_type": cohort.cohort_type,
                "cohort_number": cohort.cohort_number,
                "count": len(records),
                "items": [r.summary() for r in records],
            },
        )

    def lookup(self, email: str) -> ServiceResult:
        """Every enrollment held by *email*, across cohorts."""
        op = "lookup"
        normalized = normalize_email(email)
        try:
            records = self._workspace.store.find_by_email(normalized)
        except StoreError as exc:
            return _store_failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "email": normalized,
                "count": len(records),
                "items": [r.summary() for r in records],
            },
        )
