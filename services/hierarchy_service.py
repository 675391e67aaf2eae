"""Read-only projections of the employee hierarchy.

Trees are rebuilt from the repository on every cache miss by expanding
``children_of`` at each node; nothing here mutates the store.
"""

import logging
from collections import Counter

from repositories.employee_repository import EmployeeRecord, EmployeeRepository
from schemas.employee import PathNode, StatsSummary, TreeNode
from services.exceptions import EmployeeNotFoundError
from services.hierarchy_cache import (
    FULL_HIERARCHY_KEY,
    STATS_KEY,
    HierarchyCache,
    subtree_key,
)

logger = logging.getLogger(__name__)


class HierarchyService:
    """Builds org chart trees, breadcrumb paths and headcount statistics."""

    def __init__(
        self,
        repository: EmployeeRepository,
        cache: HierarchyCache | None = None,
        exclude_inactive: bool = False,
    ):
        """Initialize the service.

        Args:
            repository: Hierarchy store to read from.
            cache: Optional projection cache shared with the write path.
            exclude_inactive: Leave inactive employees (and everything under
                them) out of trees and direct-report counts.
        """
        self.repository = repository
        self.cache = cache
        self.exclude_inactive = exclude_inactive

    def _cached(self, key: str, build):
        if self.cache is None:
            return build()
        return self.cache.get_or_set(key, build)

    def full_tree(self) -> TreeNode | None:
        """Get the whole organization rooted at the root employee.

        Returns:
            The root TreeNode, or None when the organization has no root.
        """
        return self._cached(FULL_HIERARCHY_KEY, self._build_full_tree)

    def _build_full_tree(self) -> TreeNode | None:
        root = self.repository.find_root()
        if root is None:
            logger.info("No root employee found; hierarchy is empty")
            return None
        return self._build_node(root, set())

    def subtree(self, employee_id: int) -> TreeNode:
        """Get the tree rooted at one employee.

        Raises:
            EmployeeNotFoundError: If the employee does not exist.
        """
        return self._cached(subtree_key(employee_id), lambda: self._build_subtree(employee_id))

    def _build_subtree(self, employee_id: int) -> TreeNode:
        employee = self.repository.find_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")
        return self._build_node(employee, set())

    def _build_node(self, employee: EmployeeRecord, visited: set[int]) -> TreeNode:
        visited.add(employee.id)
        children = []
        for report in self.repository.children_of(employee.id, active_only=self.exclude_inactive):
            if report.id in visited:
                logger.error(
                    "Cycle detected while building hierarchy: %s reports to %s",
                    report.id,
                    employee.id,
                )
                continue
            children.append(self._build_node(report, visited))
        return TreeNode(
            id=employee.id,
            name=employee.name,
            title=employee.title,
            level=employee.level,
            department=employee.department,
            department_name=employee.department_name,
            status=employee.status,
            manager_id=employee.manager_id,
            manager_name=employee.manager_name,
            direct_report_count=len(children),
            children=children,
        )

    def path_to_root(self, employee_id: int) -> list[PathNode]:
        """Get the chain of employees from the root down to ``employee_id``.

        Raises:
            EmployeeNotFoundError: If the employee does not exist.
        """
        if self.repository.find_by_id(employee_id) is None:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")

        ancestors = self.repository.ancestors_of(employee_id, max_depth=self.repository.count())
        chain = list(reversed(ancestors)) + [employee_id]
        records = self.repository.find_many(chain)
        return [
            PathNode(
                id=record.id,
                name=record.name,
                designation=record.title,
                level=record.level,
                department=record.department,
            )
            for record in (records.get(node_id) for node_id in chain)
            if record is not None
        ]

    def stats(self) -> StatsSummary:
        """Count employees by department, level and status in one scan."""
        return self._cached(STATS_KEY, self._build_stats)

    def _build_stats(self) -> StatsSummary:
        employees = self.repository.list_all()
        by_department = Counter(employee.department for employee in employees)
        by_level = Counter(employee.level.value for employee in employees)
        active = sum(1 for employee in employees if employee.is_active)
        return StatsSummary(
            total=len(employees),
            by_department=dict(by_department),
            by_level=dict(by_level),
            active=active,
            inactive=len(employees) - active,
        )
