"""Tests for the hierarchy store primitives."""

import logging
from datetime import date

from models.enums import EmployeeLevel, EmployeeStatus
from repositories.employee_repository import EmployeeRepository
from tests.conftest import add_employee


class TestLookups:
    def test_find_by_id_resolves_reference_data(self, repository, org):
        engineer = repository.find_by_id(org.engineer)

        assert engineer.title == "Senior Software Engineer"
        assert engineer.level == EmployeeLevel.L4
        assert engineer.department == "TECHNOLOGY"
        assert engineer.department_name == "Technology"
        assert engineer.manager_id == org.eng_manager
        assert engineer.manager_name == "Eng Manager"

    def test_find_by_id_missing(self, repository, org):
        assert repository.find_by_id(9999) is None

    def test_find_by_email_is_case_insensitive(self, repository, org):
        assert repository.find_by_email("CTO@Example.com").id == org.cto

    def test_find_many(self, repository, org):
        found = repository.find_many([org.ceo, org.junior, 9999])
        assert set(found) == {org.ceo, org.junior}


class TestChildren:
    def test_children_in_creation_order(self, repository, org):
        assert [child.id for child in repository.children_of(org.ceo)] == [org.cto, org.cfo]

    def test_leaf_has_no_children(self, repository, org):
        assert repository.children_of(org.junior) == []

    def test_active_only_filter(self, db, repository, org):
        repository.set_status(org.cfo, EmployeeStatus.INACTIVE)
        db.commit()

        assert [child.id for child in repository.children_of(org.ceo, active_only=True)] == [org.cto]
        assert repository.count_children(org.ceo) == 2


class TestAncestors:
    def test_walks_up_to_root(self, repository, org):
        assert repository.ancestors_of(org.junior) == [
            org.engineer,
            org.eng_manager,
            org.cto,
            org.ceo,
        ]

    def test_root_has_no_ancestors(self, repository, org):
        assert repository.ancestors_of(org.ceo) == []

    def test_walk_is_bounded_even_with_a_cycle(self, db, repository, org):
        # Corrupt the data behind the service's back.
        repository.set_manager(org.cto, org.junior)
        db.commit()

        ancestors = repository.ancestors_of(org.engineer)
        assert len(ancestors) == repository.ancestor_walk_limit

    def test_explicit_depth_ceiling(self, repository, org):
        assert repository.ancestors_of(org.junior, max_depth=2) == [org.engineer, org.eng_manager]

    def test_default_ceiling_is_configurable(self, db, org):
        assert EmployeeRepository(db, ancestor_walk_limit=1).ancestors_of(org.junior) == [
            org.engineer
        ]


class TestRoot:
    def test_find_root(self, repository, org):
        assert repository.find_root().id == org.ceo

    def test_empty_org_has_no_root(self, repository, designations):
        assert repository.find_root() is None

    def test_multiple_roots_pick_earliest_and_log(self, db, repository, designations, org, caplog):
        second = add_employee(db, designations, "Stray", "Executive Director")

        with caplog.at_level(logging.WARNING):
            root = repository.find_root()

        assert root.id == org.ceo
        assert second != org.ceo
        assert "Multiple root employees" in caplog.text


class TestListing:
    def test_list_all_filters(self, repository, org):
        finance = repository.list_all(department="FINANCE")
        assert [e.id for e in finance] == [org.cfo, org.fin_manager, org.accountant]

        leads = repository.list_all(level=EmployeeLevel.L3)
        assert [e.id for e in leads] == [org.eng_manager, org.fin_manager]

    def test_search_by_name(self, repository, org):
        assert [e.id for e in repository.search_by_name("manager")] == [
            org.eng_manager,
            org.fin_manager,
        ]

    def test_find_managers_by_levels_prefers_earliest_hire(self, db, repository, designations, org):
        veteran = add_employee(
            db,
            designations,
            "Veteran Lead",
            "Engineering Manager",
            org.cto,
            hire_date=date(2010, 1, 1),
        )

        candidates = repository.find_managers_by_levels("TECHNOLOGY", [EmployeeLevel.L3])
        assert [c.id for c in candidates] == [veteran, org.eng_manager]

    def test_find_designation(self, repository, designations):
        designation = repository.find_designation("Accountant", "FINANCE")
        assert designation.level == EmployeeLevel.L5
        assert repository.find_designation("Accountant", "TECHNOLOGY") is None


class TestWrites:
    def test_set_manager_does_not_validate(self, db, repository, org):
        repository.set_manager(org.ceo, org.junior)
        db.commit()
        assert repository.find_by_id(org.ceo).manager_id == org.junior

    def test_delete(self, db, repository, org):
        repository.delete(org.junior)
        db.commit()
        assert repository.find_by_id(org.junior) is None
        assert repository.count() == 7
