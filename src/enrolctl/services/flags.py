"""FlagsService — inspect and clear client-side submission flags."""

from __future__ import annotations

from typing import Any

from enrolctl.services.base import BaseService
from enrolctl.services.result import ServiceResult


class FlagsService(BaseService):
    def show(self) -> ServiceResult:
        flags = self._workspace.flags
        items: list[dict[str, Any]] = []
        for cohort_number, cohort_flags in flags.all().items():
            for flag in cohort_flags:
                items.append({"cohort_number": cohort_number, **flag.model_dump()})
        return ServiceResult(
            ok=True,
            op="flags_show",
            data={"path": str(flags.path), "count": len(items), "items": items},
        )

    def clear(self, cohort_number: str | None = None) -> ServiceResult:
        """Drop the flags for one cohort, or all of them."""
        op = "flags_clear"
        try:
            removed = self._workspace.flags.clear(
                cohort_number.strip() if cohort_number else None
            )
        except OSError as exc:
            return ServiceResult.failure(op, "FLAGS_WRITE_FAILED", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={"cleared": removed, "cohort_number": cohort_number},
        )
