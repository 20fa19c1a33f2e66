"""Fixtures for allocator stage tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from enrolctl.allocation import Allocator
from enrolctl.infrastructure.store import StoreError
from enrolctl.infrastructure.workspace import Workspace
from enrolctl.services.allocate import build_allocator


@pytest.fixture
def allocator(workspace: Workspace, fixed_clock: Callable[[], date]) -> Allocator:
    return build_allocator(workspace, clock=fixed_clock)


@pytest.fixture
def fail() -> Callable[..., Callable[..., Any]]:
    """Build a stand-in store method that always raises StoreError."""

    def _fail(message: str = "store unreachable") -> Callable[..., Any]:
        def _raise(*_args: Any, **_kwargs: Any) -> Any:
            raise StoreError(message)

        return _raise

    return _fail
