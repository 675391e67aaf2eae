"""Models package."""

from models.base import Base, ModifyModel
from models.department import Department
from models.designation import Designation
from models.employee import Employee
from models.enums import ActorRole, EmployeeLevel, EmployeeStatus

__all__ = [
    "Base",
    "ModifyModel",
    "Department",
    "Designation",
    "Employee",
    "ActorRole",
    "EmployeeLevel",
    "EmployeeStatus",
]
