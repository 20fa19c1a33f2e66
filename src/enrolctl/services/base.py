"""BaseService — abstract foundation for all enrolctl services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides the record store, cohort config source, and flags.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from enrolctl.infrastructure.workspace import Workspace


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class RegistryService(BaseService):
            def get(self, identifier: str) -> ServiceResult:
                record = self._workspace.store.find_by_identifier(identifier)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace
