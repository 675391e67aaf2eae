"""Typed failures raised by the hierarchy services.

Every failure is terminal: it reflects invalid input against the current
state of the hierarchy, so nothing here is retried. The HTTP layer maps
``status_code`` and ``error_code`` onto the response.
"""

from models.enums import EmployeeLevel


class HierarchyError(Exception):
    """Base class for hierarchy rule violations."""

    error_code = "HierarchyError"
    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmployeeNotFoundError(HierarchyError):
    error_code = "NotFound"
    status_code = 404


class InvalidTransitionError(HierarchyError):
    error_code = "InvalidTransition"
    status_code = 422


class LevelViolationError(HierarchyError):
    """The proposed manager does not outrank the employee."""

    error_code = "LevelViolation"
    status_code = 422

    def __init__(self, message: str, valid_levels: list[EmployeeLevel]) -> None:
        self.valid_levels = valid_levels
        super().__init__(message)


class CircularReferenceError(HierarchyError):
    error_code = "CircularReference"
    status_code = 409


class DepartmentMismatchError(HierarchyError):
    error_code = "DepartmentMismatch"
    status_code = 422


class ForbiddenError(HierarchyError):
    error_code = "Forbidden"
    status_code = 403


class HasDirectReportsError(HierarchyError):
    error_code = "HasDirectReports"
    status_code = 409
