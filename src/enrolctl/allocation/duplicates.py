"""Duplicate detection — one record per submitter per cohort.

A store read failure is handled by policy:

- ``fail-open`` (default): log the error and let allocation proceed. This
  accepts a small risk of admitting a duplicate while the store is degraded.
- ``fail-closed``: re-raise so the attempt ends as a transient failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from enrolctl.config.models import DuplicatePolicy
from enrolctl.infrastructure.store import StoreError

if TYPE_CHECKING:
    from enrolctl.domain.cohort import Cohort
    from enrolctl.infrastructure.store import RecordStore

log = structlog.get_logger(__name__)


class DuplicateDetector:
    """Find an existing identifier for a submitter in a cohort."""

    def __init__(
        self,
        store: RecordStore,
        *,
        policy: DuplicatePolicy = DuplicatePolicy.FAIL_OPEN,
    ) -> None:
        self._store = store
        self._policy = policy

    @property
    def policy(self) -> DuplicatePolicy:
        return self._policy

    def find_existing(self, cohort: Cohort, email: str) -> str | None:
        """Return the submitter's identifier in *cohort*, or None.

        Raises:
            StoreError: only under the fail-closed policy.
        """
        try:
            matches = self._store.find_by_submitter(cohort, email)
        except StoreError as exc:
            if self._policy is DuplicatePolicy.FAIL_CLOSED:
                log.error(
                    "duplicate.lookup_failed",
                    cohort=cohort.label,
                    policy=str(self._policy),
                    error=str(exc),
                )
                raise
            log.warning(
                "duplicate.lookup_failed",
                cohort=cohort.label,
                policy=str(self._policy),
                error=str(exc),
            )
            return None

        if not matches:
            return None
        if len(matches) > 1:
            log.error(
                "duplicate.multiple_records",
                cohort=cohort.label,
                email=email,
                identifiers=[m.identifier for m in matches],
            )
        return matches[0].identifier
