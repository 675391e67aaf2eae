"""Services package."""

from services.hierarchy_cache import HierarchyCache
from services.hierarchy_service import HierarchyService
from services.reassignment_service import ReassignmentService

__all__ = ["HierarchyCache", "HierarchyService", "ReassignmentService"]
