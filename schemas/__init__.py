"""Schemas package."""

from schemas.auth import ActingUser
from schemas.employee import (
    EmployeeCreateRequest,
    EmployeeResponse,
    ErrorResponse,
    ManagerUpdateRequest,
    PathNode,
    StatsSummary,
    StatusUpdateRequest,
    TreeNode,
)

__all__ = [
    "ActingUser",
    "EmployeeCreateRequest",
    "EmployeeResponse",
    "ErrorResponse",
    "ManagerUpdateRequest",
    "PathNode",
    "StatsSummary",
    "StatusUpdateRequest",
    "TreeNode",
]
