"""SQLAlchemy base class and mixins."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class ModifyModel:
    """Mixin for audit trail columns (created/updated timestamps and user references).

    The created_by and updated_by columns reference the employee table. No
    relationships are declared for them; callers that need the acting
    employee look it up explicitly through the repository.
    """

    created_at: Mapped[datetime] = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @declared_attr
    def created_by(cls) -> Mapped[int | None]:
        """Employee ID who created the record."""
        return Column(
            Integer,
            ForeignKey("employee.id", ondelete="SET NULL"),
            nullable=True,
        )

    @declared_attr
    def updated_by(cls) -> Mapped[int | None]:
        """Employee ID who last updated the record."""
        return Column(
            Integer,
            ForeignKey("employee.id", ondelete="SET NULL"),
            nullable=True,
        )
