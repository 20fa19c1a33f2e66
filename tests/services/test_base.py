"""Tests for BaseService and service inheritance."""

import pytest

from enrolctl.infrastructure.workspace import Workspace
from enrolctl.services.allocate import AllocateService
from enrolctl.services.base import BaseService
from enrolctl.services.check import CheckService
from enrolctl.services.cohort import CohortService
from enrolctl.services.flags import FlagsService
from enrolctl.services.init import InitService
from enrolctl.services.registry import RegistryService
from enrolctl.services.upgrade import UpgradeService


class TestBaseService:
    def test_workspace_stored(self, workspace: Workspace) -> None:
        service = BaseService(workspace)
        assert service._workspace is workspace

    def test_subclass_pattern(self, workspace: Workspace) -> None:
        class MyService(BaseService):
            def where(self) -> str:
                return f"store at {self._workspace.db_path}"

        assert str(workspace.db_path) in MyService(workspace).where()


@pytest.mark.parametrize(
    "service_cls",
    [
        AllocateService,
        CheckService,
        CohortService,
        FlagsService,
        InitService,
        RegistryService,
        UpgradeService,
    ],
)
def test_services_extend_base(service_cls: type[BaseService], workspace: Workspace) -> None:
    assert issubclass(service_cls, BaseService)
    assert service_cls(workspace)._workspace is workspace
