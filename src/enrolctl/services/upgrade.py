"""UpgradeService — store schema migration with Alembic.

Pipeline: BACKUP → STAMP (unversioned stores) → MIGRATE → VALIDATE → REPORT

Unversioned stores come in two shapes. A store created by ``create_all``
already has the current schema and is stamped at head. A legacy store
without the ``sequence`` column is stamped at the baseline and then
migrated forward.
"""

from __future__ import annotations

import logging
from typing import Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from enrolctl.infrastructure.database.migrations import build_config
from enrolctl.services.base import BaseService
from enrolctl.services.check import SEVERITY_ERROR, CheckService
from enrolctl.services.result import ServiceResult

logger = logging.getLogger(__name__)

BASELINE_REVISION = "001_baseline"


class UpgradeService(BaseService):
    """Handles store schema migrations via Alembic."""

    def _db_url(self) -> str:
        return f"sqlite:///{self._workspace.db_path}"

    def _unversioned_revision(self) -> str:
        """Revision an unversioned store's schema corresponds to."""
        insp = inspect(self._workspace.engine)
        columns = {c["name"] for c in insp.get_columns("enrollments")}
        return "head" if "sequence" in columns else BASELINE_REVISION

    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"
        try:
            cfg = build_config(self._db_url())
            script = ScriptDirectory.from_config(cfg)
            head = script.get_current_head()

            with self._workspace.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            pending: list[dict[str, Any]] = []
            if current != head and head is not None:
                rev_obj = script.get_revision(head)
                while rev_obj is not None and rev_obj.revision != current:
                    pending.append({"revision": rev_obj.revision, "description": rev_obj.doc or ""})
                    down = rev_obj.down_revision
                    if down is None:
                        break
                    rev_obj = script.get_revision(str(down))
        except Exception as exc:
            logger.debug("Migration check failed", exc_info=True)
            return ServiceResult.failure(op, "CHECK_FAILED", f"Failed to check migrations: {exc}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    def apply(self) -> ServiceResult:
        """BACKUP → STAMP → MIGRATE → VALIDATE → REPORT."""
        op = "upgrade"
        warnings: list[str] = []

        check_result = self.check_pending()
        if not check_result.ok:
            return check_result

        if check_result.data["pending_count"] == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check_result.data["head"],
                    "message": "Store is already up to date",
                },
            )

        check_svc = CheckService(self._workspace)
        try:
            backup_path = check_svc.backup_db()
        except OSError as exc:
            return ServiceResult.failure(op, "BACKUP_FAILED", f"Backup failed: {exc}")

        applied = check_result.data["pending_count"]
        try:
            cfg = build_config(self._db_url())
            if check_result.data["current"] is None:
                stamped = self._unversioned_revision()
                command.stamp(cfg, stamped)
                logger.info("Stamped unversioned store at %s", stamped)
                applied = self.check_pending().data.get("pending_count", 0)
            command.upgrade(cfg, "head")
        except Exception as exc:
            logger.debug("Migration failed", exc_info=True)
            return ServiceResult.failure(
                op,
                "MIGRATION_FAILED",
                f"Migration failed: {exc}. Backup at: {backup_path}",
                detail={"backup_path": str(backup_path)},
            )

        integrity = check_svc.check()
        if integrity.ok:
            errors = sum(1 for i in integrity.data["issues"] if i["severity"] == SEVERITY_ERROR)
            if errors:
                warnings.append(f"Post-migration integrity check found {errors} errors")
        else:
            warnings.append("Post-migration integrity check could not run")

        after = self.check_pending()
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": applied,
                "current": after.data.get("current") if after.ok else check_result.data["head"],
                "backup_path": str(backup_path),
            },
            warnings=warnings,
        )

    def stamp_current(self) -> ServiceResult:
        """Stamp an unversioned store at the revision its schema matches.

        Fresh stores land at head. Legacy stores land at the baseline and
        still need :meth:`apply`.
        """
        op = "upgrade"
        try:
            cfg = build_config(self._db_url())
            revision = self._unversioned_revision()
            command.stamp(cfg, revision)
            head = ScriptDirectory.from_config(cfg).get_current_head()
            current = head if revision == "head" else revision
        except Exception as exc:
            logger.debug("Stamp failed", exc_info=True)
            return ServiceResult.failure(op, "STAMP_FAILED", f"Failed to stamp store: {exc}")
        return ServiceResult(
            ok=True, op=op, data={"stamped": True, "current": current, "head": head}
        )
