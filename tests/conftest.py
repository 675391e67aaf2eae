"""
Pytest configuration and shared fixtures for the org chart service tests.

This file provides:
- Environment for the settings module (SQLite in memory, dummy OIDC values)
- A fresh schema and session per test
- A seeded organization
- Service fixtures and an authenticated API client
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("OPENID_CONFIG_URL", "https://login.example.com/.well-known/openid-configuration")
os.environ.setdefault("VALID_AUDIENCE", "api://org-chart")
os.environ.setdefault("VALID_ISSUER", "https://sts.example.com/tenant/")

import threading
from collections.abc import Generator
from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from config.database import SessionLocal, engine
from models import Base, Department, Designation, Employee, EmployeeLevel, EmployeeStatus
from repositories.employee_repository import EmployeeRepository
from services.hierarchy_cache import HierarchyCache
from services.hierarchy_service import HierarchyService
from services.reassignment_service import ReassignmentService

# (department code, department name, [(title, level), ...])
REFERENCE_DATA = [
    (
        "EXECUTIVE",
        "Executive",
        [
            ("Chief Executive Officer", EmployeeLevel.L1),
            ("Executive Director", EmployeeLevel.L2),
            ("Executive Associate", EmployeeLevel.L5),
        ],
    ),
    (
        "TECHNOLOGY",
        "Technology",
        [
            ("Chief Technology Officer", EmployeeLevel.L2),
            ("Engineering Manager", EmployeeLevel.L3),
            ("Senior Software Engineer", EmployeeLevel.L4),
            ("Software Engineer", EmployeeLevel.L5),
        ],
    ),
    (
        "FINANCE",
        "Finance",
        [
            ("Chief Financial Officer", EmployeeLevel.L2),
            ("Finance Manager", EmployeeLevel.L3),
            ("Senior Accountant", EmployeeLevel.L4),
            ("Accountant", EmployeeLevel.L5),
        ],
    ),
]


def seed_reference_data(db: Session) -> dict[str, int]:
    """Insert departments and designations; returns designation ids by title."""
    designation_ids = {}
    for code, name, designations in REFERENCE_DATA:
        department = Department(code=code, name=name)
        db.add(department)
        db.flush()
        for title, level in designations:
            designation = Designation(title=title, department_id=department.id, level=level)
            db.add(designation)
            db.flush()
            designation_ids[title] = designation.id
    db.commit()
    return designation_ids


def add_employee(
    db: Session,
    designation_ids: dict[str, int],
    name: str,
    title: str,
    manager_id: int | None = None,
    status: EmployeeStatus = EmployeeStatus.ACTIVE,
    hire_date: date | None = None,
) -> int:
    """Insert an employee directly, bypassing all hierarchy rules."""
    employee = Employee(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        designation_id=designation_ids[title],
        manager_id=manager_id,
        status=status,
        hire_date=hire_date,
    )
    db.add(employee)
    db.commit()
    return employee.id


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def designations(db) -> dict[str, int]:
    return seed_reference_data(db)


@pytest.fixture
def org(db, designations) -> SimpleNamespace:
    """Seed a small organization.

    ceo (L1, EXECUTIVE)
    ├── cto (L2, TECHNOLOGY)
    │   └── eng_manager (L3)
    │       └── engineer (L4)
    │           └── junior (L5)
    └── cfo (L2, FINANCE)
        └── fin_manager (L3)
            └── accountant (L5)
    """
    ceo = add_employee(db, designations, "Ceo", "Chief Executive Officer")
    cto = add_employee(db, designations, "Cto", "Chief Technology Officer", ceo)
    cfo = add_employee(db, designations, "Cfo", "Chief Financial Officer", ceo)
    eng_manager = add_employee(db, designations, "Eng Manager", "Engineering Manager", cto)
    engineer = add_employee(db, designations, "Engineer", "Senior Software Engineer", eng_manager)
    junior = add_employee(db, designations, "Junior", "Software Engineer", engineer)
    fin_manager = add_employee(db, designations, "Fin Manager", "Finance Manager", cfo)
    accountant = add_employee(db, designations, "Accountant", "Accountant", fin_manager)
    return SimpleNamespace(
        ceo=ceo,
        cto=cto,
        cfo=cfo,
        eng_manager=eng_manager,
        engineer=engineer,
        junior=junior,
        fin_manager=fin_manager,
        accountant=accountant,
    )


@pytest.fixture
def repository(db) -> EmployeeRepository:
    return EmployeeRepository(db)


@pytest.fixture
def cache() -> HierarchyCache:
    return HierarchyCache(ttl_seconds=300)


@pytest.fixture
def hierarchy(repository, cache) -> HierarchyService:
    return HierarchyService(repository, cache=cache)


@pytest.fixture
def writer(db, repository, cache) -> ReassignmentService:
    return ReassignmentService(db, repository, cache=cache, lock=threading.Lock())


# ============================================================================
# API Client Fixtures
# ============================================================================

@pytest.fixture
def auth_payload(org) -> dict:
    """Token payload returned by the overridden auth dependency; mutable per test."""
    return {
        "user_id": org.ceo,
        "email": "ceo@example.com",
        "role": "ceo",
        "token": {},
    }


@pytest.fixture
def client(db, auth_payload) -> Generator:
    """FastAPI test client with authentication overridden."""
    from fastapi.testclient import TestClient

    from app.auth.auth import token_required
    from app.main import app

    app.dependency_overrides[token_required] = lambda: auth_payload
    app.state.hierarchy_cache.clear()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.hierarchy_cache.clear()
