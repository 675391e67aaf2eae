"""Employee hierarchy API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.dependencies import (
    get_acting_user,
    get_employee_repository,
    get_hierarchy_service,
    get_reassignment_service,
)
from config.database import get_db
from models.enums import EmployeeLevel
from repositories.employee_repository import EmployeeRepository
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
from services.exceptions import EmployeeNotFoundError, HierarchyError
from services.hierarchy_service import HierarchyService
from services.reassignment_service import ReassignmentService

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    401: {"description": "Authentication failed"},
    403: {"model": ErrorResponse, "description": "Acting user lacks permission"},
    404: {"model": ErrorResponse, "description": "Employee or manager not found"},
    409: {"model": ErrorResponse, "description": "Cycle or remaining direct reports"},
    422: {"model": ErrorResponse, "description": "Hierarchy rule violated"},
}


def _run_write(db: Session, action, description: str):
    """Run a write, rolling the session back on any failure."""
    try:
        return action()
    except (HierarchyError, HTTPException):
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Unexpected error during %s", description)
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}",
        ) from e


@router.get(
    "",
    response_model=list[EmployeeResponse],
    summary="List Employees",
    description="List employees in creation order, optionally filtered by department and level or searched by name.",
)
async def list_employees(
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    repository: Annotated[EmployeeRepository, Depends(get_employee_repository)],
    department: Annotated[str | None, Query(description="Department code")] = None,
    level: Annotated[EmployeeLevel | None, Query(description="Employee level")] = None,
    search: Annotated[str | None, Query(description="Case-insensitive name search")] = None,
) -> list[EmployeeResponse]:
    if search:
        records = repository.search_by_name(search)
    else:
        records = repository.list_all(department=department, level=level)
    return [EmployeeResponse.model_validate(record) for record in records]


@router.get(
    "/hierarchy",
    response_model=TreeNode,
    summary="Full Organization Hierarchy",
    description="Tree of the whole organization starting from the root employee. Cached briefly.",
    responses={404: {"model": ErrorResponse, "description": "No root employee"}},
)
async def get_full_hierarchy(
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    hierarchy: Annotated[HierarchyService, Depends(get_hierarchy_service)],
) -> TreeNode:
    tree = hierarchy.full_tree()
    if tree is None:
        raise HTTPException(
            status_code=404,
            detail="No organization hierarchy found (no root employee)",
        )
    return tree


@router.get(
    "/stats",
    response_model=StatsSummary,
    summary="Employee Statistics",
    description="Headcount by department, level and status.",
)
async def get_stats(
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    hierarchy: Annotated[HierarchyService, Depends(get_hierarchy_service)],
) -> StatsSummary:
    return hierarchy.stats()


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=201,
    summary="Hire Employee",
    description="""
    Create an employee. The level is looked up from the designation within
    the department. Without an explicit manager, the closest higher-level
    employee in the same department is chosen, falling back to the root.
    """,
    responses=ERROR_RESPONSES,
)
async def create_employee(
    body: EmployeeCreateRequest,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    writer: Annotated[ReassignmentService, Depends(get_reassignment_service)],
    db: Annotated[Session, Depends(get_db)],
) -> EmployeeResponse:
    record = _run_write(db, lambda: writer.hire(body, acting_user=acting_user), "hire")
    return EmployeeResponse.model_validate(record)


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    summary="Get Employee",
    responses={404: {"model": ErrorResponse, "description": "Employee not found"}},
)
async def get_employee(
    employee_id: int,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    repository: Annotated[EmployeeRepository, Depends(get_employee_repository)],
) -> EmployeeResponse:
    record = repository.find_by_id(employee_id)
    if record is None:
        raise EmployeeNotFoundError(f"Employee {employee_id} not found")
    return EmployeeResponse.model_validate(record)


@router.get(
    "/{employee_id}/subtree",
    response_model=TreeNode,
    summary="Employee Subtree",
    description="Tree of an employee and everyone reporting to them, directly or transitively.",
    responses={404: {"model": ErrorResponse, "description": "Employee not found"}},
)
async def get_subtree(
    employee_id: int,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    hierarchy: Annotated[HierarchyService, Depends(get_hierarchy_service)],
) -> TreeNode:
    return hierarchy.subtree(employee_id)


@router.get(
    "/{employee_id}/path",
    response_model=list[PathNode],
    summary="Path From Root",
    description="Breadcrumb of employees from the root down to the given employee.",
    responses={404: {"model": ErrorResponse, "description": "Employee not found"}},
)
async def get_path(
    employee_id: int,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    hierarchy: Annotated[HierarchyService, Depends(get_hierarchy_service)],
) -> list[PathNode]:
    return hierarchy.path_to_root(employee_id)


@router.get(
    "/{employee_id}/direct-reports",
    response_model=list[EmployeeResponse],
    summary="Direct Reports",
    responses={404: {"model": ErrorResponse, "description": "Employee not found"}},
)
async def get_direct_reports(
    employee_id: int,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    repository: Annotated[EmployeeRepository, Depends(get_employee_repository)],
) -> list[EmployeeResponse]:
    if repository.find_by_id(employee_id) is None:
        raise EmployeeNotFoundError(f"Employee {employee_id} not found")
    return [
        EmployeeResponse.model_validate(record) for record in repository.children_of(employee_id)
    ]


@router.patch(
    "/{employee_id}/manager",
    response_model=EmployeeResponse,
    summary="Reassign Manager",
    description="""
    Move an employee under a new manager (drag and drop).

    The move is rejected if the manager does not outrank the employee, if it
    would create a reporting cycle, if it touches the root, or if the acting
    user is not allowed to make it.
    """,
    responses=ERROR_RESPONSES,
)
async def update_manager(
    employee_id: int,
    body: ManagerUpdateRequest,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    writer: Annotated[ReassignmentService, Depends(get_reassignment_service)],
    db: Annotated[Session, Depends(get_db)],
) -> EmployeeResponse:
    logger.info(
        "Reassignment requested: employee_id=%s manager_id=%s by role=%s",
        employee_id,
        body.manager_id,
        acting_user.role.value,
    )
    record = _run_write(
        db,
        lambda: writer.reassign(employee_id, body.manager_id, acting_user=acting_user),
        "reassignment",
    )
    return EmployeeResponse.model_validate(record)


@router.patch(
    "/{employee_id}/status",
    response_model=EmployeeResponse,
    summary="Activate or Deactivate Employee",
    responses=ERROR_RESPONSES,
)
async def update_status(
    employee_id: int,
    body: StatusUpdateRequest,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    writer: Annotated[ReassignmentService, Depends(get_reassignment_service)],
    db: Annotated[Session, Depends(get_db)],
) -> EmployeeResponse:
    record = _run_write(
        db,
        lambda: writer.update_status(employee_id, body.status, acting_user=acting_user),
        "status update",
    )
    return EmployeeResponse.model_validate(record)


@router.delete(
    "/{employee_id}",
    status_code=204,
    summary="Delete Employee",
    description="Delete an employee. Employees with direct reports cannot be deleted.",
    responses=ERROR_RESPONSES,
)
async def delete_employee(
    employee_id: int,
    acting_user: Annotated[ActingUser, Depends(get_acting_user)],
    writer: Annotated[ReassignmentService, Depends(get_reassignment_service)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    _run_write(db, lambda: writer.delete(employee_id, acting_user=acting_user), "deletion")
