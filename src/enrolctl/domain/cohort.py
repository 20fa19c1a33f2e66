"""Cohort identity and the per-attempt cohort context.

A cohort is an enrollment period named by a type label and a version number.
Identifiers are sequenced within a cohort.

INVARIANT: A CohortContext is captured once per allocation attempt and is
never re-read mid-attempt.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class ContextSource(StrEnum):
    """Where a cohort context came from."""

    STORE = "store"
    FALLBACK = "fallback"


class Cohort(BaseModel):
    """An enrollment period. Equality is exact on both fields."""

    model_config = {"frozen": True}

    cohort_type: str
    cohort_number: str

    @property
    def label(self) -> str:
        return f"{self.cohort_type}-{self.cohort_number}"

    def __str__(self) -> str:
        return self.label


class CohortContext(BaseModel):
    """Active cohort plus the starting number for its sequence."""

    model_config = {"frozen": True}

    cohort: Cohort
    starting_number: int = Field(ge=0)
    source: ContextSource = ContextSource.STORE

    @property
    def is_fallback(self) -> bool:
        return self.source is ContextSource.FALLBACK
