"""Enumerations shared by the ORM models, schemas and services."""

import enum


class EmployeeLevel(str, enum.Enum):
    """Organizational level. L1 carries the most authority, L5 the least."""

    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"
    L5 = "L5"


class ActorRole(str, enum.Enum):
    """Role of an authenticated user acting on the hierarchy.

    ``admin`` and ``ceo`` are permission aliases; they do not change the
    level stored on the acting user's own employee record.
    """

    ADMIN = "admin"
    CEO = "ceo"
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"
    L5 = "L5"


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
