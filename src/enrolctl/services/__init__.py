"""Service layer: every operation returns a ServiceResult."""

from enrolctl.services.result import ServiceError, ServiceResult

__all__ = ["ServiceError", "ServiceResult"]
