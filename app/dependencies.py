"""FastAPI dependencies wiring the hierarchy services to a request."""

from contextlib import AbstractContextManager
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.auth.auth import token_required
from config.database import get_db
from config.settings import settings
from models.enums import ActorRole
from repositories.employee_repository import EmployeeRepository
from schemas.auth import ActingUser
from services.hierarchy_cache import HierarchyCache
from services.hierarchy_service import HierarchyService
from services.reassignment_service import ReassignmentService


def get_acting_user(auth_payload: Annotated[dict, Depends(token_required)]) -> ActingUser:
    """Turn the validated token payload into an explicit acting user."""
    return ActingUser(
        employee_id=auth_payload.get("user_id"),
        role=ActorRole(auth_payload["role"]),
    )


def get_hierarchy_cache(request: Request) -> HierarchyCache:
    return request.app.state.hierarchy_cache


def get_write_lock(request: Request) -> AbstractContextManager:
    return request.app.state.write_lock


def get_employee_repository(db: Annotated[Session, Depends(get_db)]) -> EmployeeRepository:
    return EmployeeRepository(db, ancestor_walk_limit=settings.ancestor_walk_limit)


def get_hierarchy_service(
    repository: Annotated[EmployeeRepository, Depends(get_employee_repository)],
    cache: Annotated[HierarchyCache, Depends(get_hierarchy_cache)],
) -> HierarchyService:
    return HierarchyService(
        repository,
        cache=cache,
        exclude_inactive=settings.exclude_inactive_from_reads,
    )


def get_reassignment_service(
    db: Annotated[Session, Depends(get_db)],
    repository: Annotated[EmployeeRepository, Depends(get_employee_repository)],
    cache: Annotated[HierarchyCache, Depends(get_hierarchy_cache)],
    lock: Annotated[AbstractContextManager, Depends(get_write_lock)],
) -> ReassignmentService:
    return ReassignmentService(
        db,
        repository,
        cache=cache,
        lock=lock,
        require_same_department=settings.require_same_department,
        drag_policy=settings.drag_policy,
    )
