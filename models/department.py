"""Department reference table."""

from sqlalchemy import Column, Integer, String

from models.base import Base


class Department(Base):
    """A department an employee's designation belongs to (e.g. ``TECHNOLOGY``)."""

    __tablename__ = "department"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
