"""
Tests package for the Org Chart Service.

This package contains tests for:
- Level rules and access policy (test_levels.py, test_access_policy.py)
- Hierarchy store and projections (test_employee_repository.py, test_hierarchy_service.py)
- Reassignment engine (test_reassignment_service.py)
- API endpoints and authentication (test_api.py, test_auth.py)

Run tests with:
    pytest tests/
"""
