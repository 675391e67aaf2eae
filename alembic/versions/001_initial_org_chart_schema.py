"""Initial org chart schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-18

This migration:
1. Creates the department and designation reference tables
2. Creates the employee table with its self-referencing manager key
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

employee_level = sa.Enum("L1", "L2", "L3", "L4", "L5", name="employee_level")
employee_status = sa.Enum("ACTIVE", "INACTIVE", name="employee_status")


def upgrade() -> None:
    op.create_table(
        "department",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code", name="uq_department_code"),
    )

    op.create_table(
        "designation",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("level", employee_level, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["department_id"],
            ["department.id"],
            name="fk_designation_department_id",
        ),
        sa.UniqueConstraint("title", "department_id", name="uq_designation_title_department"),
    )

    op.create_table(
        "employee",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("designation_id", sa.Integer(), nullable=False),
        sa.Column("manager_id", sa.Integer(), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("status", employee_status, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("updated_by", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_employee_email"),
        sa.ForeignKeyConstraint(
            ["designation_id"],
            ["designation.id"],
            name="fk_employee_designation_id",
        ),
        sa.ForeignKeyConstraint(
            ["manager_id"],
            ["employee.id"],
            name="fk_employee_manager_id",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["created_by"],
            ["employee.id"],
            name="fk_employee_created_by",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["updated_by"],
            ["employee.id"],
            name="fk_employee_updated_by",
            ondelete="SET NULL",
        ),
    )

    # Create indexes for common queries
    op.create_index("ix_employee_manager_id", "employee", ["manager_id"])
    op.create_index("ix_employee_designation_id", "employee", ["designation_id"])


def downgrade() -> None:
    # Drop indexes
    op.drop_index("ix_employee_designation_id", table_name="employee")
    op.drop_index("ix_employee_manager_id", table_name="employee")

    # Drop tables
    op.drop_table("employee")
    op.drop_table("designation")
    op.drop_table("department")

    employee_status.drop(op.get_bind(), checkfirst=True)
    employee_level.drop(op.get_bind(), checkfirst=True)
