"""Pydantic schemas for employee and hierarchy API requests/responses."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.enums import EmployeeLevel, EmployeeStatus


class EmployeeResponse(BaseModel):
    """A single employee with its resolved designation and manager."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    title: str
    level: EmployeeLevel
    department: str
    department_name: str
    status: EmployeeStatus
    manager_id: int | None = None
    manager_name: str | None = None
    phone: str | None = None
    hire_date: date | None = None


class TreeNode(BaseModel):
    """One node of an org chart projection, with its reports nested below."""

    id: int
    name: str
    title: str
    level: EmployeeLevel
    department: str
    department_name: str
    status: EmployeeStatus
    manager_id: int | None = None
    manager_name: str | None = None
    direct_report_count: int = 0
    children: list["TreeNode"] = Field(default_factory=list)


class PathNode(BaseModel):
    """One step of the breadcrumb from the root down to an employee."""

    id: int
    name: str
    designation: str
    level: EmployeeLevel
    department: str


class StatsSummary(BaseModel):
    """Aggregate headcount figures from a single scan of all employees."""

    total: int
    by_department: dict[str, int] = Field(default_factory=dict)
    by_level: dict[str, int] = Field(default_factory=dict)
    active: int = 0
    inactive: int = 0


class ManagerUpdateRequest(BaseModel):
    """Body of a reassignment (drag and drop) request."""

    manager_id: int | None = Field(
        description="New manager's employee ID; null is only accepted for the root",
    )


class StatusUpdateRequest(BaseModel):
    """Body of an activate/deactivate request."""

    status: EmployeeStatus


class EmployeeCreateRequest(BaseModel):
    """Body of a hire request."""

    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3)
    designation: str = Field(
        min_length=1,
        description="Designation title, resolved within the department",
    )
    department: str = Field(
        min_length=1,
        description="Department code, e.g. TECHNOLOGY",
    )
    manager_id: int | None = Field(
        default=None,
        description="Explicit manager; resolved automatically when omitted",
    )
    phone: str | None = None
    hire_date: date | None = None

    @field_validator("name", "designation", "department")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Trim surrounding whitespace and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    detail: str = Field(
        description="Error message",
    )
    error_code: str | None = Field(
        default=None,
        description="Optional error code for client handling",
    )
