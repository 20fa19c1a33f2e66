"""CohortService — inspect and change the active cohort."""

from __future__ import annotations

from enrolctl.allocation.cohort_context import CohortContextResolver
from enrolctl.domain.cohort import Cohort
from enrolctl.infrastructure.store import StoreError
from enrolctl.services.base import BaseService
from enrolctl.services.result import ServiceResult


class CohortService(BaseService):
    """Operator-facing view of the cohort configuration."""

    def show(self) -> ServiceResult:
        """Report the cohort an allocation attempt would resolve right now."""
        op = "cohort_show"
        resolver = CohortContextResolver(
            self._workspace.config_source, self._workspace.settings.cohort
        )
        context = resolver.resolve()
        warnings: list[str] = []
        if context.is_fallback:
            warnings.append("No cohort configured in the store; using the [cohort] fallback")

        data = {
            "cohort_type": context.cohort.cohort_type,
            "cohort_number": context.cohort.cohort_number,
            "starting_number": context.starting_number,
            "source": str(context.source),
        }
        try:
            data["enrolled"] = self._workspace.store.count_by_cohort().get(context.cohort, 0)
        except StoreError as exc:
            warnings.append(f"Could not count enrollments: {exc}")

        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def set_active(
        self,
        cohort_type: str,
        cohort_number: str,
        starting_number: int,
    ) -> ServiceResult:
        """Make *cohort_type*/*cohort_number* the active cohort."""
        op = "cohort_set"
        cohort_type = cohort_type.strip()
        cohort_number = cohort_number.strip()
        if not cohort_type or not cohort_number:
            return ServiceResult.failure(
                op, "INVALID_COHORT", "Cohort type and number must be non-empty"
            )
        if starting_number < 0:
            return ServiceResult.failure(
                op, "INVALID_COHORT", f"Starting number must be non-negative: {starting_number}"
            )

        cohort = Cohort(cohort_type=cohort_type, cohort_number=cohort_number)
        try:
            context = self._workspace.config_source.set_active_cohort(cohort, starting_number)
        except StoreError as exc:
            return ServiceResult.failure(op, "STORE_ERROR", str(exc), detail={"retryable": True})

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "cohort_type": context.cohort.cohort_type,
                "cohort_number": context.cohort.cohort_number,
                "starting_number": context.starting_number,
            },
        )
