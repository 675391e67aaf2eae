"""Designation reference table.

Maps a job title within a department to an organizational level. It is
consulted once, when an employee is hired; the level is never edited on the
employee afterwards.
"""

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, UniqueConstraint

from models.base import Base
from models.enums import EmployeeLevel


class Designation(Base):
    __tablename__ = "designation"
    __table_args__ = (
        UniqueConstraint("title", "department_id", name="uq_designation_title_department"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    department_id = Column(Integer, ForeignKey("department.id"), nullable=False)
    level = Column(Enum(EmployeeLevel, name="employee_level"), nullable=False)
