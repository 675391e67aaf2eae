"""Write path for the employee hierarchy.

``reassign`` is the only way an employee's manager changes. Every rule is
checked against the committed state before the single-field update, and the
whole validate-then-commit sequence runs under one lock so two concurrent
moves cannot jointly introduce a cycle. Cached projections touched by a
write are invalidated before the call returns.
"""

import logging
from contextlib import AbstractContextManager, nullcontext

from sqlalchemy.orm import Session

from models.enums import EmployeeLevel, EmployeeStatus
from repositories.employee_repository import EmployeeRecord, EmployeeRepository
from schemas.auth import ActingUser
from schemas.employee import EmployeeCreateRequest
from services.access_policy import (
    DragPolicy,
    can_drag,
    ensure_can_create_root,
    ensure_can_delete,
    ensure_can_reassign,
    role_to_level,
)
from services.exceptions import (
    CircularReferenceError,
    DepartmentMismatchError,
    EmployeeNotFoundError,
    ForbiddenError,
    HasDirectReportsError,
    HierarchyError,
    InvalidTransitionError,
    LevelViolationError,
)
from services.hierarchy_cache import HierarchyCache
from services.levels import can_manage, describe, rank, valid_manager_levels

logger = logging.getLogger(__name__)


class ReassignmentService:
    """Validates and commits changes to the reporting structure."""

    def __init__(
        self,
        db: Session,
        repository: EmployeeRepository,
        cache: HierarchyCache | None = None,
        lock: AbstractContextManager | None = None,
        require_same_department: bool = False,
        drag_policy: DragPolicy = "strict",
    ):
        """Initialize the service.

        Args:
            db: Session the repository writes through; committed here.
            repository: Hierarchy store.
            cache: Projection cache to invalidate after each write.
            lock: Lock serializing validate-and-commit across callers.
            require_same_department: Reject managers from another department.
            drag_policy: Which drag rule governs acting users.
        """
        self.db = db
        self.repository = repository
        self.cache = cache
        self.lock = lock
        self.require_same_department = require_same_department
        self.drag_policy = drag_policy

    def _guard(self):
        return self.lock if self.lock is not None else nullcontext()

    def _invalidate(self, employee_ids) -> None:
        if self.cache is not None:
            self.cache.invalidate_for(employee_ids)

    def _ancestors(self, employee_id: int) -> list[int]:
        # Bounded by headcount so deep orgs are walked completely.
        return self.repository.ancestors_of(employee_id, max_depth=self.repository.count())

    def _find(self, employee_id: int, role: str = "Employee") -> EmployeeRecord:
        employee = self.repository.find_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(f"{role} {employee_id} not found")
        return employee

    def _check_level(self, manager: EmployeeRecord, employee_level: EmployeeLevel) -> None:
        if can_manage(manager.level, employee_level):
            return
        valid_levels = valid_manager_levels(employee_level)
        allowed = ", ".join(level.value for level in valid_levels) or "none"
        raise LevelViolationError(
            f"{describe(manager.level)} ({manager.level.value}) cannot manage "
            f"{describe(employee_level)} ({employee_level.value}). "
            f"Valid manager levels: {allowed}",
            valid_levels=valid_levels,
        )

    def _check_department(self, manager: EmployeeRecord, department: str) -> None:
        if self.require_same_department and manager.department != department:
            raise DepartmentMismatchError(
                f"Manager must be in the same department. Employee is in {department}, "
                f"manager is in {manager.department}"
            )

    def reassign(
        self,
        employee_id: int,
        new_manager_id: int | None,
        acting_user: ActingUser | None = None,
    ) -> EmployeeRecord:
        """Move an employee under a new manager.

        Args:
            employee_id: Employee being moved.
            new_manager_id: Proposed manager; None is only accepted for the
                root, where it is a no-op.
            acting_user: Caller to check permissions for; None for internal
                operations such as seeding.

        Returns:
            The employee as stored after the move.

        Raises:
            EmployeeNotFoundError: Employee or manager does not exist.
            InvalidTransitionError: Self-assignment, orphaning a non-root or
                giving the root a manager.
            LevelViolationError: The manager does not outrank the employee.
            CircularReferenceError: The manager reports to the employee.
            DepartmentMismatchError: Departments differ and the rule is on.
            ForbiddenError: The acting user may not make this move.
        """
        with self._guard():
            try:
                employee = self._find(employee_id)

                if new_manager_id is None:
                    if employee.is_root:
                        return employee
                    raise InvalidTransitionError(
                        f"Cannot remove the manager of employee {employee_id}; "
                        "only the root has no manager"
                    )
                if employee.is_root:
                    raise InvalidTransitionError("Cannot assign a manager to the root employee")
                if new_manager_id == employee_id:
                    raise InvalidTransitionError("Employee cannot be their own manager")

                new_manager = self._find(new_manager_id, role="Manager")
                self._check_level(new_manager, employee.level)

                if employee_id in self._ancestors(new_manager_id):
                    raise CircularReferenceError(
                        f"Employee {new_manager_id} reports to employee {employee_id}; "
                        "this would create a circular reporting structure"
                    )

                self._check_department(new_manager, employee.department)

                if acting_user is not None:
                    ensure_can_reassign(
                        acting_user,
                        employee.level,
                        new_manager.level,
                        policy=self.drag_policy,
                    )

                old_ancestors = self._ancestors(employee_id)
                self.repository.set_manager(
                    employee_id,
                    new_manager_id,
                    updated_by=acting_user.employee_id if acting_user else None,
                )
                self.db.commit()
            except HierarchyError as e:
                self.db.rollback()
                logger.info(
                    "Reassignment rejected: employee_id=%s manager_id=%s kind=%s",
                    employee_id,
                    new_manager_id,
                    e.error_code,
                )
                raise
            except Exception:
                self.db.rollback()
                raise

            self._invalidate(
                old_ancestors + [employee_id, new_manager_id] + self._ancestors(new_manager_id)
            )

        logger.info(
            "Reassigned employee_id=%s from manager_id=%s to manager_id=%s (actor=%s)",
            employee_id,
            employee.manager_id,
            new_manager_id,
            acting_user.role.value if acting_user else "internal",
        )
        return self._find(employee_id)

    def delete(self, employee_id: int, acting_user: ActingUser | None = None) -> None:
        """Delete an employee that has no direct reports.

        Raises:
            EmployeeNotFoundError: The employee does not exist.
            ForbiddenError: The acting user may not delete employees.
            HasDirectReportsError: Someone still reports to the employee.
        """
        with self._guard():
            try:
                self._find(employee_id)
                if acting_user is not None:
                    ensure_can_delete(acting_user)

                report_count = self.repository.count_children(employee_id)
                if report_count:
                    raise HasDirectReportsError(
                        f"Cannot delete employee {employee_id} with {report_count} direct "
                        "report(s). Please reassign or remove direct reports first."
                    )

                ancestors = self._ancestors(employee_id)
                self.repository.delete(employee_id)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

            self._invalidate(ancestors + [employee_id])

        logger.info("Deleted employee_id=%s", employee_id)

    def update_status(
        self,
        employee_id: int,
        status: EmployeeStatus,
        acting_user: ActingUser | None = None,
    ) -> EmployeeRecord:
        """Mark an employee active or inactive.

        Raises:
            EmployeeNotFoundError: The employee does not exist.
            ForbiddenError: The acting user may not act on this employee.
        """
        with self._guard():
            try:
                employee = self._find(employee_id)
                if acting_user is not None and not can_drag(
                    role_to_level(acting_user.role), employee.level, self.drag_policy
                ):
                    raise ForbiddenError(
                        f"Role {acting_user.role.value} may not change the status of an "
                        f"employee at level {employee.level.value}"
                    )
                self.repository.set_status(employee_id, status)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

            self._invalidate(self._ancestors(employee_id) + [employee_id])

        logger.info("Set status of employee_id=%s to %s", employee_id, status.value)
        return self._find(employee_id)

    def hire(
        self,
        request: EmployeeCreateRequest,
        acting_user: ActingUser | None = None,
    ) -> EmployeeRecord:
        """Create an employee and place it in the hierarchy.

        The level comes from the designation reference table. The first
        employee of an empty organization becomes the root; everyone else
        gets the requested manager or an automatically resolved one.

        Raises:
            EmployeeNotFoundError: Unknown designation or manager.
            InvalidTransitionError: The email is already registered.
            LevelViolationError: The manager does not outrank the new hire.
            DepartmentMismatchError: Departments differ and the rule is on.
            ForbiddenError: The acting user may not place the new hire there,
                or may not create the root of an empty organization.
        """
        with self._guard():
            try:
                if self.repository.find_by_email(request.email) is not None:
                    raise InvalidTransitionError(f"Email {request.email} is already registered")

                designation = self.repository.find_designation(
                    request.designation, request.department
                )
                if designation is None:
                    raise EmployeeNotFoundError(
                        f"Designation {request.designation!r} not found in department "
                        f"{request.department}"
                    )
                level = EmployeeLevel(designation.level)

                manager = None
                if request.manager_id is not None:
                    manager = self._find(request.manager_id, role="Manager")
                    self._check_level(manager, level)
                    self._check_department(manager, request.department)
                    if acting_user is not None:
                        ensure_can_reassign(
                            acting_user, level, manager.level, policy=self.drag_policy
                        )
                else:
                    root = self.repository.find_root()
                    if root is not None:
                        manager = self._resolve_manager(request.department, level, root)
                        self._check_level(manager, level)
                        if acting_user is not None:
                            ensure_can_reassign(
                                acting_user, level, manager.level, policy=self.drag_policy
                            )
                    elif acting_user is not None:
                        ensure_can_create_root(acting_user)

                employee = self.repository.create(
                    name=request.name,
                    email=request.email,
                    designation_id=designation.id,
                    manager_id=manager.id if manager else None,
                    phone=request.phone,
                    hire_date=request.hire_date,
                    created_by=acting_user.employee_id if acting_user else None,
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

            if manager is not None:
                self._invalidate(self._ancestors(manager.id) + [manager.id])
            else:
                self._invalidate([])

        logger.info(
            "Hired employee_id=%s level=%s manager_id=%s",
            employee.id,
            level.value,
            employee.manager_id,
        )
        return employee

    def _resolve_manager(
        self,
        department: str,
        level: EmployeeLevel,
        root: EmployeeRecord,
    ) -> EmployeeRecord:
        """Pick a manager for a new hire.

        Prefers the closest higher level in the same department, then the
        earliest hire, then creation order. Falls back to the root.
        """
        candidates = self.repository.find_managers_by_levels(
            department, valid_manager_levels(level)
        )
        if not candidates:
            return root
        target_rank = rank(level)
        return min(candidates, key=lambda candidate: target_rank - rank(candidate.level))
