"""Permission rules for moving employees around the hierarchy.

Two drag rules are supported:

``strict``
    The actor must strictly outrank the employee being moved.

``privileged_tier``
    L1 and L2 actors may pick up anyone, except that an L1 actor may not
    move another L1. Everyone else falls back to the strict rule.

Whichever rule is active, the new manager must sit inside the actor's band:
no higher than the actor and strictly above the employee. A move that
passes the drag rule but not the band is still forbidden.
"""

from typing import Literal

from models.enums import ActorRole, EmployeeLevel
from schemas.auth import ActingUser
from services.exceptions import ForbiddenError
from services.levels import can_manage, rank

DragPolicy = Literal["strict", "privileged_tier"]

PRIVILEGED_LEVELS = frozenset({EmployeeLevel.L1, EmployeeLevel.L2})
ADMIN_ROLES = frozenset({ActorRole.ADMIN, ActorRole.CEO})


def role_to_level(role: ActorRole | str) -> EmployeeLevel:
    """Effective level of an actor; ``admin`` and ``ceo`` rank as L1."""
    role = ActorRole(role)
    if role in (ActorRole.ADMIN, ActorRole.CEO):
        return EmployeeLevel.L1
    return EmployeeLevel(role.value)


def can_drag(
    actor_level: EmployeeLevel,
    target_level: EmployeeLevel,
    policy: DragPolicy = "strict",
) -> bool:
    """Whether an actor may initiate a move of an employee at ``target_level``."""
    if policy == "privileged_tier" and actor_level in PRIVILEGED_LEVELS:
        return not (actor_level == EmployeeLevel.L1 and target_level == EmployeeLevel.L1)
    return can_manage(actor_level, target_level)


def in_manager_band(
    actor_level: EmployeeLevel,
    target_level: EmployeeLevel,
    manager_level: EmployeeLevel,
) -> bool:
    """Whether ``manager_level`` lies between the actor and the target."""
    return rank(actor_level) <= rank(manager_level) < rank(target_level)


def can_reassign(
    actor_level: EmployeeLevel,
    target_level: EmployeeLevel,
    manager_level: EmployeeLevel,
    policy: DragPolicy = "strict",
) -> bool:
    return can_drag(actor_level, target_level, policy) and in_manager_band(
        actor_level, target_level, manager_level
    )


def ensure_can_reassign(
    actor: ActingUser,
    target_level: EmployeeLevel,
    manager_level: EmployeeLevel,
    policy: DragPolicy = "strict",
) -> None:
    """Raise ForbiddenError unless ``actor`` may make this move.

    Raises:
        ForbiddenError: If the drag rule or the manager band rejects it.
    """
    actor_level = role_to_level(actor.role)
    if not can_drag(actor_level, target_level, policy):
        raise ForbiddenError(
            f"Role {actor.role.value} may not move an employee at level {target_level.value}"
        )
    if not in_manager_band(actor_level, target_level, manager_level):
        raise ForbiddenError(
            f"Role {actor.role.value} may not assign a {manager_level.value} manager "
            f"to a {target_level.value} employee"
        )


def ensure_can_delete(actor: ActingUser) -> None:
    if actor.role not in ADMIN_ROLES:
        raise ForbiddenError(f"Role {actor.role.value} may not delete employees")


def ensure_can_create_root(actor: ActingUser) -> None:
    """Only ``admin`` and ``ceo`` may found an organization with its root."""
    if actor.role not in ADMIN_ROLES:
        raise ForbiddenError(f"Role {actor.role.value} may not create the root employee")
