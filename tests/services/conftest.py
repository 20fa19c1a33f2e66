"""Fixtures for service-layer tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import pytest

from enrolctl.domain.cohort import Cohort
from enrolctl.infrastructure.workspace import Workspace
from enrolctl.services.allocate import AllocateService, build_allocator


@pytest.fixture
def allocate_svc(workspace: Workspace, fixed_clock: Callable[[], date]) -> AllocateService:
    """AllocateService over an active Placement-2.0 cohort starting at 2501."""
    workspace.config_source.set_active_cohort(
        Cohort(cohort_type="Placement", cohort_number="2.0"), 2501
    )
    return AllocateService(workspace, allocator=build_allocator(workspace, clock=fixed_clock))
