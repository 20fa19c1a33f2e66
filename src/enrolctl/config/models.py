"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, enrolctl.toml only contains overrides.
The ``[cohort]`` section is the fallback used when the active cohort cannot
be read from the store.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field

from enrolctl.domain.cohort import Cohort, CohortContext, ContextSource


class DuplicatePolicy(StrEnum):
    """How the duplicate check behaves when the store read fails."""

    FAIL_OPEN = "fail-open"
    FAIL_CLOSED = "fail-closed"


class CohortConfig(BaseModel):
    """[cohort] section."""

    model_config = {"frozen": True}

    cohort_type: str = "Placement"
    cohort_number: str = "2.0"
    starting_number: int = Field(default=2501, ge=0)

    def as_context(self) -> CohortContext:
        """This section as a fallback cohort context."""
        return CohortContext(
            cohort=Cohort(cohort_type=self.cohort_type, cohort_number=self.cohort_number),
            starting_number=self.starting_number,
            source=ContextSource.FALLBACK,
        )


class IdentifierConfig(BaseModel):
    """[identifier] section."""

    model_config = {"frozen": True}

    marker: str = Field(default="MBY", min_length=1)
    min_digits: int = Field(default=4, ge=1, le=12)


class AllocationConfig(BaseModel):
    """[allocation] section."""

    model_config = {"frozen": True}

    duplicate_policy: DuplicatePolicy = DuplicatePolicy.FAIL_OPEN
    max_collision_retries: int = Field(default=1, ge=0, le=3)


class StoreConfig(BaseModel):
    """[store] section. Relative paths resolve against the workspace root."""

    model_config = {"frozen": True}

    path: Path = Path(".enrolctl/enrolctl.db")
    timeout_seconds: float = Field(default=5.0, gt=0)


class FlagsConfig(BaseModel):
    """[flags] section."""

    model_config = {"frozen": True}

    path: Path = Path(".enrolctl/submission.json")


class EnrolConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    cohort: CohortConfig = Field(default_factory=CohortConfig)
    identifier: IdentifierConfig = Field(default_factory=IdentifierConfig)
    allocation: AllocationConfig = Field(default_factory=AllocationConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    flags: FlagsConfig = Field(default_factory=FlagsConfig)
