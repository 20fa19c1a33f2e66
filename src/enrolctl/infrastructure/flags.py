"""Client-side submission flags — a best-effort idempotency hint.

After a terminal ``allocated`` or ``duplicate`` outcome the CLI records the
identifier here, keyed by the cohort number the client submitted for and
then by submitter email. A later ``submit`` for the same pair short-circuits
before reaching the allocator.

This is an optimization, not a correctness mechanism: the file is
per-device and trivially cleared. A corrupt file reads as empty.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class SubmissionFlag(BaseModel):
    """One recorded submission."""

    model_config = {"frozen": True}

    token: str
    email: str
    identifier: str
    outcome: str
    recorded: str


class SubmissionFlags:
    """JSON-file store of submission flags."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable submission flags at %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def _cohort_entries(self, data: dict[str, Any], cohort_number: str) -> dict[str, Any]:
        entries = data.get(cohort_number)
        return entries if isinstance(entries, dict) else {}

    def get(self, cohort_number: str, email: str) -> SubmissionFlag | None:
        raw = self._cohort_entries(self._load(), cohort_number).get(email)
        if raw is None:
            return None
        try:
            return SubmissionFlag.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed submission flag for %s in %s", email, cohort_number)
            return None

    def all(self) -> dict[str, list[SubmissionFlag]]:
        """Every readable flag, grouped by cohort number."""
        data = self._load()
        flags: dict[str, list[SubmissionFlag]] = {}
        for cohort_number in sorted(data):
            for email in sorted(self._cohort_entries(data, cohort_number)):
                flag = self.get(cohort_number, email)
                if flag is not None:
                    flags.setdefault(cohort_number, []).append(flag)
        return flags

    def record(
        self, cohort_number: str, email: str, identifier: str, outcome: str
    ) -> SubmissionFlag:
        """Record a terminal outcome, replacing any earlier flag for the pair."""
        flag = SubmissionFlag(
            token=f"enrolctl_{identifier}_{int(time.time() * 1000)}",
            email=email,
            identifier=identifier,
            outcome=outcome,
            recorded=datetime.now(UTC).isoformat(),
        )
        data = self._load()
        entries = self._cohort_entries(data, cohort_number)
        entries[email] = flag.model_dump()
        data[cohort_number] = entries
        self._save(data)
        return flag

    def clear(self, cohort_number: str | None = None) -> int:
        """Remove the flags for *cohort_number*, or every flag. Returns count removed."""
        data = self._load()
        if cohort_number is None:
            removed = sum(len(self._cohort_entries(data, key)) for key in data)
            data = {}
        else:
            removed = len(self._cohort_entries(data, cohort_number))
            data.pop(cohort_number, None)
        self._save(data)
        return removed
