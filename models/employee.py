"""Employee model.

Each row points at its manager through ``manager_id``. Exactly one row, the
root of the organization, has no manager.
"""

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Text

from models.base import Base, ModifyModel
from models.enums import EmployeeStatus


class Employee(ModifyModel, Base):
    """Employee model mapping to the employee table."""

    __tablename__ = "employee"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(Text, unique=True, nullable=False)
    designation_id = Column(Integer, ForeignKey("designation.id"), nullable=False)
    manager_id = Column(
        Integer,
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    phone = Column(String(32))
    hire_date = Column(Date)
    status = Column(
        Enum(EmployeeStatus, name="employee_status"),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )
