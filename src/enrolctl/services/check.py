"""CheckService — store integrity audit.

Read-only. Four categories:

- sequence_integrity: per-cohort suffixes are unique and consecutive.
- identifier_integrity: identifiers are unique, well-formed, and agree
  with their stored ``sequence``.
- submitter_integrity: one record per email per cohort.
- cohort_frontier: warns when the active cohort starts more than one past
  the highest suffix held by other cohorts. A stale cohort then never
  collides with the new one, so cross-cohort closure cannot trigger.
"""

from __future__ import annotations

import shutil
from collections import Counter, defaultdict
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from enrolctl.allocation.cohort_context import CohortContextResolver
from enrolctl.domain.ids import parse_suffix, validate_identifier
from enrolctl.infrastructure.store import StoreError
from enrolctl.services.base import BaseService
from enrolctl.services.result import ServiceResult

if TYPE_CHECKING:
    from enrolctl.domain.cohort import Cohort, CohortContext
    from enrolctl.domain.records import EnrollmentRecord

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_SEQUENCE = "sequence_integrity"
CAT_IDENTIFIER = "identifier_integrity"
CAT_SUBMITTER = "submitter_integrity"
CAT_FRONTIER = "cohort_frontier"

BACKUP_MAX_COUNT = 10


def _issue(
    category: str,
    severity: str,
    message: str,
    *,
    identifier: str | None = None,
    cohort: Cohort | None = None,
) -> dict[str, Any]:
    return {
        "category": category,
        "severity": severity,
        "message": message,
        "identifier": identifier,
        "cohort": cohort.label if cohort is not None else None,
    }


class CheckService(BaseService):
    """Audits the enrollment store against the allocator's invariants."""

    def check(self, *, min_severity: str = SEVERITY_WARNING) -> ServiceResult:
        """Report integrity issues without modifying anything.

        With ``min_severity="error"`` warnings are dropped from the report.
        """
        try:
            records = self._workspace.store.list_all()
        except StoreError as exc:
            return ServiceResult.failure(
                "check", "STORE_ERROR", str(exc), detail={"retryable": True}
            )

        by_cohort: dict[Cohort, list[EnrollmentRecord]] = defaultdict(list)
        for record in records:
            by_cohort[record.cohort].append(record)

        issues: list[dict[str, Any]] = []
        issues.extend(self._check_identifiers(records))
        for cohort, cohort_records in by_cohort.items():
            issues.extend(self._check_sequence(cohort, cohort_records))
            issues.extend(self._check_submitters(cohort, cohort_records))

        resolver = CohortContextResolver(
            self._workspace.config_source, self._workspace.settings.cohort
        )
        issues.extend(self._check_frontier(resolver.resolve(), by_cohort))
        if min_severity == SEVERITY_ERROR:
            issues = [i for i in issues if i["severity"] == SEVERITY_ERROR]

        return ServiceResult(
            ok=True,
            op="check",
            data={"issues": issues, "count": len(issues), "records": len(records)},
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def _check_identifiers(self, records: list[EnrollmentRecord]) -> list[dict[str, Any]]:
        ident = self._workspace.settings.identifier
        issues: list[dict[str, Any]] = []

        counts = Counter(r.identifier for r in records)
        for identifier, n in sorted(counts.items()):
            if n > 1:
                issues.append(
                    _issue(
                        CAT_IDENTIFIER,
                        SEVERITY_ERROR,
                        f"Identifier held by {n} records",
                        identifier=identifier,
                    )
                )

        for record in records:
            if not validate_identifier(
                record.identifier, marker=ident.marker, min_digits=ident.min_digits
            ):
                issues.append(
                    _issue(
                        CAT_IDENTIFIER,
                        SEVERITY_WARNING,
                        "Malformed identifier",
                        identifier=record.identifier,
                        cohort=record.cohort,
                    )
                )
            if record.sequence is None:
                issues.append(
                    _issue(
                        CAT_IDENTIFIER,
                        SEVERITY_WARNING,
                        "Missing stored sequence; ignored by the sorted high-water lookup",
                        identifier=record.identifier,
                        cohort=record.cohort,
                    )
                )
            elif record.sequence != parse_suffix(record.identifier):
                issues.append(
                    _issue(
                        CAT_IDENTIFIER,
                        SEVERITY_ERROR,
                        f"Stored sequence {record.sequence} disagrees with identifier suffix",
                        identifier=record.identifier,
                        cohort=record.cohort,
                    )
                )
        return issues

    def _check_sequence(
        self, cohort: Cohort, records: list[EnrollmentRecord]
    ) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        suffixes = sorted(parse_suffix(r.identifier) for r in records)

        for suffix, n in sorted(Counter(suffixes).items()):
            if n > 1:
                issues.append(
                    _issue(
                        CAT_SEQUENCE,
                        SEVERITY_ERROR,
                        f"Suffix {suffix} allocated {n} times",
                        cohort=cohort,
                    )
                )

        unique = sorted(set(suffixes))
        for low, high in zip(unique, unique[1:], strict=False):
            if high - low > 1:
                issues.append(
                    _issue(
                        CAT_SEQUENCE,
                        SEVERITY_WARNING,
                        f"Gap in sequence between {low} and {high}",
                        cohort=cohort,
                    )
                )
        return issues

    def _check_submitters(
        self, cohort: Cohort, records: list[EnrollmentRecord]
    ) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        by_email: dict[str, list[str]] = defaultdict(list)
        for record in records:
            by_email[record.submitter_email].append(record.identifier)

        for email, identifiers in sorted(by_email.items()):
            if len(identifiers) > 1:
                issues.append(
                    _issue(
                        CAT_SUBMITTER,
                        SEVERITY_ERROR,
                        f"{email} holds {len(identifiers)} records: {', '.join(identifiers)}",
                        identifier=identifiers[0],
                        cohort=cohort,
                    )
                )
        return issues

    def _check_frontier(
        self,
        context: CohortContext,
        by_cohort: dict[Cohort, list[EnrollmentRecord]],
    ) -> list[dict[str, Any]]:
        other_suffixes = [
            parse_suffix(r.identifier)
            for cohort, records in by_cohort.items()
            if cohort != context.cohort
            for r in records
        ]
        if not other_suffixes:
            return []

        highest = max(other_suffixes)
        if context.starting_number <= highest + 1:
            return []
        return [
            _issue(
                CAT_FRONTIER,
                SEVERITY_WARNING,
                (
                    f"Active cohort starts at {context.starting_number}, above every "
                    f"suffix used by other cohorts (max {highest}); "
                    "cohort closure will not be detected for stale cohorts"
                ),
                cohort=context.cohort,
            )
        ]

    # ------------------------------------------------------------------
    # Backups (used by the upgrade pipeline)
    # ------------------------------------------------------------------

    def backup_db(self) -> Path:
        """Create a timestamped copy of the store next to it."""
        db_path = self._workspace.db_path
        backup_dir = db_path.parent / "backups"
        backup_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
        backup_path = backup_dir / f"{db_path.stem}-{timestamp}.db"
        shutil.copy2(str(db_path), str(backup_path))

        backups = sorted(backup_dir.glob(f"{db_path.stem}-*.db"))
        for old in backups[: max(0, len(backups) - BACKUP_MAX_COUNT)]:
            old.unlink(missing_ok=True)
        return backup_path
