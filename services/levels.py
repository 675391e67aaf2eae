"""Organizational level ranking.

Ranks run from 1 (most authority) to 5. A manager must always hold a
strictly lower rank number than each of its direct reports.
"""

from models.enums import EmployeeLevel

LEVEL_RANKS: dict[EmployeeLevel, int] = {
    EmployeeLevel.L1: 1,
    EmployeeLevel.L2: 2,
    EmployeeLevel.L3: 3,
    EmployeeLevel.L4: 4,
    EmployeeLevel.L5: 5,
}

LEVEL_DESCRIPTIONS: dict[EmployeeLevel, str] = {
    EmployeeLevel.L1: "Officers (C-Suite)",
    EmployeeLevel.L2: "Managers",
    EmployeeLevel.L3: "Leads",
    EmployeeLevel.L4: "Seniors",
    EmployeeLevel.L5: "Juniors",
}


def rank(level: EmployeeLevel | str) -> int:
    """Return the numeric rank of a level.

    Raises:
        ValueError: If ``level`` is not a known level.
    """
    return LEVEL_RANKS[EmployeeLevel(level)]


def can_manage(manager_level: EmployeeLevel | str, employee_level: EmployeeLevel | str) -> bool:
    """True iff ``manager_level`` strictly outranks ``employee_level``."""
    return rank(manager_level) < rank(employee_level)


def valid_manager_levels(employee_level: EmployeeLevel | str) -> list[EmployeeLevel]:
    """Levels allowed to manage an employee of ``employee_level``, highest first."""
    employee_rank = rank(employee_level)
    return [level for level, value in LEVEL_RANKS.items() if value < employee_rank]


def managed_levels(level: EmployeeLevel | str) -> list[EmployeeLevel]:
    """Levels that ``level`` may manage, highest first."""
    own_rank = rank(level)
    return [candidate for candidate, value in LEVEL_RANKS.items() if value > own_rank]


def describe(level: EmployeeLevel | str) -> str:
    return LEVEL_DESCRIPTIONS[EmployeeLevel(level)]
