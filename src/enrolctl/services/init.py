"""InitService — prepare a workspace: store, migration stamp, config."""

from __future__ import annotations

from enrolctl.config.discovery import CONFIG_FILENAME, render_default_config
from enrolctl.domain.cohort import Cohort
from enrolctl.infrastructure.store import StoreError
from enrolctl.services.base import BaseService
from enrolctl.services.result import ServiceResult
from enrolctl.services.upgrade import UpgradeService


class InitService(BaseService):
    """Initialize the workspace that the service was constructed with."""

    def init(
        self,
        *,
        cohort_type: str | None = None,
        cohort_number: str | None = None,
        starting_number: int | None = None,
        write_config: bool = True,
    ) -> ServiceResult:
        """Stamp the store, optionally activate a cohort, and write enrolctl.toml.

        The cohort is written to the store only when both *cohort_type* and
        *cohort_number* are given; missing parts fall back to the ``[cohort]``
        section.
        """
        op = "init"
        settings = self._workspace.settings
        warnings: list[str] = []

        upgrade = UpgradeService(self._workspace)
        pending = upgrade.check_pending()
        if pending.ok and pending.data["current"] is None:
            stamped = upgrade.stamp_current()
            if not stamped.ok and stamped.error is not None:
                warnings.append(stamped.error.message)
            elif stamped.data["current"] != stamped.data["head"]:
                warnings.append("Existing store predates the current schema; run enrolctl upgrade")
        elif pending.ok and pending.data["pending_count"]:
            warnings.append("Store has pending migrations; run enrolctl upgrade")

        fallback = settings.cohort
        cohort = Cohort(
            cohort_type=(cohort_type or fallback.cohort_type).strip(),
            cohort_number=(cohort_number or fallback.cohort_number).strip(),
        )
        start = fallback.starting_number if starting_number is None else starting_number

        configured = False
        if cohort_type and cohort_number:
            try:
                self._workspace.config_source.set_active_cohort(cohort, start)
                configured = True
            except (StoreError, ValueError) as exc:
                return ServiceResult.failure(op, "INIT_FAILED", str(exc))

        files_created: list[str] = []
        config_path = self._workspace.root / CONFIG_FILENAME
        if write_config and not config_path.exists():
            config_path.write_text(
                render_default_config(
                    cohort_type=cohort.cohort_type,
                    cohort_number=cohort.cohort_number,
                    starting_number=start,
                ),
                encoding="utf-8",
            )
            files_created.append(str(config_path))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(self._workspace.root),
                "store": str(self._workspace.db_path),
                "cohort_type": cohort.cohort_type,
                "cohort_number": cohort.cohort_number,
                "starting_number": start,
                "cohort_configured": configured,
                "files_created": files_created,
            },
            warnings=warnings,
        )
