"""Repository for employee hierarchy database operations.

Every read returns plain ``EmployeeRecord`` values assembled from one
explicit joined query, so callers always know how much of the graph a call
touches. Writes perform no validation; the rules live in the services.
"""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from models.department import Department
from models.designation import Designation
from models.employee import Employee
from models.enums import EmployeeLevel, EmployeeStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeRecord:
    """Read-only view of one employee and its reference data."""

    id: int
    name: str
    email: str
    manager_id: int | None
    manager_name: str | None
    title: str
    level: EmployeeLevel
    department: str
    department_name: str
    status: EmployeeStatus
    phone: str | None = None
    hire_date: date | None = None

    @property
    def is_root(self) -> bool:
        return self.manager_id is None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


class EmployeeRepository:
    """Data access layer for the employee hierarchy (the hierarchy store)."""

    def __init__(self, db: Session, ancestor_walk_limit: int = 20):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
            ancestor_walk_limit: Default hop ceiling for ``ancestors_of``.
        """
        self.db = db
        self.ancestor_walk_limit = ancestor_walk_limit

    def _record_query(self):
        manager = aliased(Employee)
        return (
            self.db.query(Employee, Designation, Department, manager.name)
            .join(Designation, Employee.designation_id == Designation.id)
            .join(Department, Designation.department_id == Department.id)
            .outerjoin(manager, Employee.manager_id == manager.id)
        )

    @staticmethod
    def _to_record(row) -> EmployeeRecord:
        employee, designation, department, manager_name = row
        return EmployeeRecord(
            id=employee.id,
            name=employee.name,
            email=employee.email,
            manager_id=employee.manager_id,
            manager_name=manager_name,
            title=designation.title,
            level=EmployeeLevel(designation.level),
            department=department.code,
            department_name=department.name,
            status=EmployeeStatus(employee.status),
            phone=employee.phone,
            hire_date=employee.hire_date,
        )

    def find_by_id(self, employee_id: int) -> EmployeeRecord | None:
        """Get one employee by ID.

        Args:
            employee_id: The employee's ID.

        Returns:
            EmployeeRecord if it exists, None otherwise.
        """
        row = self._record_query().filter(Employee.id == employee_id).first()
        return self._to_record(row) if row else None

    def find_many(self, employee_ids: list[int]) -> dict[int, EmployeeRecord]:
        """Get several employees in one query, keyed by ID."""
        if not employee_ids:
            return {}
        rows = self._record_query().filter(Employee.id.in_(employee_ids)).all()
        return {record.id: record for record in map(self._to_record, rows)}

    def find_by_email(self, email: str) -> EmployeeRecord | None:
        """Look up an employee by email address (case-insensitive)."""
        row = (
            self._record_query()
            .filter(func.lower(Employee.email) == email.lower())
            .first()
        )
        return self._to_record(row) if row else None

    def children_of(self, manager_id: int, active_only: bool = False) -> list[EmployeeRecord]:
        """Get direct reports of a manager in creation order.

        Args:
            manager_id: The manager's ID.
            active_only: Leave out inactive reports.

        Returns:
            List of EmployeeRecord, possibly empty.
        """
        query = self._record_query().filter(Employee.manager_id == manager_id)
        if active_only:
            query = query.filter(Employee.status == EmployeeStatus.ACTIVE)
        return [self._to_record(row) for row in query.order_by(Employee.id).all()]

    def count_children(self, manager_id: int) -> int:
        """Count every direct report of a manager, whatever its status."""
        return (
            self.db.query(func.count(Employee.id))
            .filter(Employee.manager_id == manager_id)
            .scalar()
        )

    def ancestors_of(self, employee_id: int, max_depth: int | None = None) -> list[int]:
        """Walk manager links upward from an employee.

        The walk stops at the root, at a missing row, or after ``max_depth``
        hops (``ancestor_walk_limit`` by default), so it terminates even if
        the data were to contain a cycle.

        Args:
            employee_id: Where the walk starts (not included in the result).
            max_depth: Hop ceiling for this walk.

        Returns:
            Ancestor IDs ordered from the direct manager up to the root.
        """
        limit = self.ancestor_walk_limit if max_depth is None else max_depth
        ancestors: list[int] = []
        current_id = employee_id
        while len(ancestors) < limit:
            manager_id = (
                self.db.query(Employee.manager_id)
                .filter(Employee.id == current_id)
                .scalar()
            )
            if manager_id is None:
                break
            ancestors.append(manager_id)
            current_id = manager_id
        return ancestors

    def find_root(self) -> EmployeeRecord | None:
        """Get the employee with no manager.

        More than one candidate is a data-integrity violation; the earliest
        created one is returned and the condition is logged.
        """
        rows = (
            self._record_query()
            .filter(Employee.manager_id.is_(None))
            .order_by(Employee.id)
            .limit(2)
            .all()
        )
        if not rows:
            return None
        if len(rows) > 1:
            logger.warning(
                "Multiple root employees found; using earliest id=%s (also id=%s)",
                rows[0][0].id,
                rows[1][0].id,
            )
        return self._to_record(rows[0])

    def count(self) -> int:
        return self.db.query(func.count(Employee.id)).scalar()

    def list_all(
        self,
        department: str | None = None,
        level: EmployeeLevel | None = None,
    ) -> list[EmployeeRecord]:
        """Get all employees in creation order, optionally filtered.

        Args:
            department: Department code to filter on.
            level: Level to filter on.

        Returns:
            List of EmployeeRecord.
        """
        query = self._record_query()
        if department:
            query = query.filter(Department.code == department)
        if level:
            query = query.filter(Designation.level == level)
        return [self._to_record(row) for row in query.order_by(Employee.id).all()]

    def search_by_name(self, term: str) -> list[EmployeeRecord]:
        """Case-insensitive substring search on employee names, sorted by name."""
        pattern = f"%{term.lower()}%"
        rows = (
            self._record_query()
            .filter(func.lower(Employee.name).like(pattern))
            .order_by(Employee.name, Employee.id)
            .all()
        )
        return [self._to_record(row) for row in rows]

    def find_managers_by_levels(
        self,
        department: str,
        levels: list[EmployeeLevel],
    ) -> list[EmployeeRecord]:
        """Get candidate managers in a department holding one of ``levels``.

        Ordered by hire date (unknown dates last), then creation order.
        """
        if not levels:
            return []
        rows = (
            self._record_query()
            .filter(Department.code == department)
            .filter(Designation.level.in_(levels))
            .order_by(Employee.hire_date.is_(None), Employee.hire_date, Employee.id)
            .all()
        )
        return [self._to_record(row) for row in rows]

    def find_designation(self, title: str, department: str) -> Designation | None:
        """Resolve a designation title within a department."""
        return (
            self.db.query(Designation)
            .join(Department, Designation.department_id == Department.id)
            .filter(Designation.title == title)
            .filter(Department.code == department)
            .first()
        )

    def create(
        self,
        name: str,
        email: str,
        designation_id: int,
        manager_id: int | None,
        phone: str | None = None,
        hire_date: date | None = None,
        created_by: int | None = None,
    ) -> EmployeeRecord:
        """Insert a new employee.

        Returns:
            The created employee as an EmployeeRecord.
        """
        employee = Employee(
            name=name,
            email=email,
            designation_id=designation_id,
            manager_id=manager_id,
            phone=phone,
            hire_date=hire_date,
            status=EmployeeStatus.ACTIVE,
            created_by=created_by,
            updated_by=created_by,
        )
        self.db.add(employee)
        self.db.flush()
        logger.info(
            "Created employee: id=%s manager_id=%s",
            employee.id,
            manager_id,
        )
        return self.find_by_id(employee.id)

    def set_manager(
        self,
        employee_id: int,
        manager_id: int | None,
        updated_by: int | None = None,
    ) -> None:
        """Point an employee at a new manager. No validation is performed."""
        values = {Employee.manager_id: manager_id}
        if updated_by:
            values[Employee.updated_by] = updated_by
        self.db.query(Employee).filter(Employee.id == employee_id).update(values)
        self.db.flush()

    def set_status(self, employee_id: int, status: EmployeeStatus) -> None:
        self.db.query(Employee).filter(Employee.id == employee_id).update({Employee.status: status})
        self.db.flush()

    def delete(self, employee_id: int) -> None:
        """Remove an employee row. No validation is performed."""
        self.db.query(Employee).filter(Employee.id == employee_id).delete()
        self.db.flush()
