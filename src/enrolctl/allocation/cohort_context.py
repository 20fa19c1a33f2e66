"""Cohort context resolution — first stage of every allocation attempt."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from enrolctl.infrastructure.config_source import InvalidConfigRow
from enrolctl.infrastructure.store import StoreError

if TYPE_CHECKING:
    from enrolctl.config.models import CohortConfig
    from enrolctl.domain.cohort import CohortContext
    from enrolctl.infrastructure.config_source import CohortConfigSource

log = structlog.get_logger(__name__)


class CohortContextResolver:
    """Resolve the active cohort, falling back to a static default.

    Allocation never dead-ends because configuration retrieval failed: a
    read error, an unusable row or an empty config table all yield the
    fallback triple.
    """

    def __init__(self, source: CohortConfigSource, fallback: CohortConfig) -> None:
        self._source = source
        self._fallback = fallback

    def resolve(self) -> CohortContext:
        try:
            context = self._source.get_active_cohort()
        except InvalidConfigRow as exc:
            log.error("config.fallback", reason="invalid_row", error=str(exc))
            return self._fallback.as_context()
        except StoreError as exc:
            log.warning("config.fallback", reason="read_failed", error=str(exc))
            return self._fallback.as_context()

        if context is None:
            log.info("config.fallback", reason="not_configured")
            return self._fallback.as_context()
        return context
