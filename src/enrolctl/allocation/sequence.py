"""Sequence resolution — next candidate identifier for a cohort.

Read-only and idempotent: without an intervening commit, two calls return
the same candidate.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import structlog

from enrolctl.domain.ids import DEFAULT_MARKER, MIN_DIGITS, EnrollmentId, parse_suffix, year_prefix
from enrolctl.infrastructure.store import StoreError

if TYPE_CHECKING:
    from enrolctl.domain.cohort import Cohort
    from enrolctl.infrastructure.store import RecordStore

log = structlog.get_logger(__name__)


def utc_today() -> date:
    return datetime.now(UTC).date()


class SequenceResolver:
    """Compute ``max suffix + 1`` (or the starting number) for a cohort.

    Primary strategy is a server-side descending sort with limit one. If the
    store rejects it, every identifier in the cohort is fetched and scanned
    client-side; unparseable suffixes count as 0.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        marker: str = DEFAULT_MARKER,
        min_digits: int = MIN_DIGITS,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._store = store
        self._marker = marker
        self._min_digits = min_digits
        self._clock = clock

    def highest_suffix(self, cohort: Cohort) -> int:
        """Highest allocated suffix in *cohort*, 0 when empty.

        Raises:
            StoreError: both strategies failed.
        """
        try:
            return parse_suffix(self._store.highest_identifier(cohort))
        except StoreError as exc:
            log.warning("sequence.primary_failed", cohort=cohort.label, error=str(exc))

        identifiers = self._store.identifiers_for_cohort(cohort)
        return max((parse_suffix(i) for i in identifiers), default=0)

    def next_candidate(self, cohort: Cohort, starting_number: int) -> EnrollmentId:
        highest = self.highest_suffix(cohort)
        sequence = highest + 1 if highest > 0 else starting_number
        candidate = EnrollmentId(
            year=year_prefix(self._clock()),
            sequence=sequence,
            marker=self._marker,
            min_digits=self._min_digits,
        )
        log.debug(
            "sequence.candidate", cohort=cohort.label, highest=highest, candidate=str(candidate)
        )
        return candidate
