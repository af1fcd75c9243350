"""Role hierarchy: who may change whose role, and who may block whom.

Roles form a total order by level. Checks are pure functions over the actor
and target records so they can be exercised without a database.
"""

from typing import Optional

from restoreview.config import get_settings
from restoreview.core.exceptions import ForbiddenError, ValidationError
from restoreview.domain.models.user import User

ROLE_LEVELS = {
    "head_admin": 100,
    "admin": 80,
    "manager": 50,
    "user": 10,
}
VALID_ROLES = tuple(ROLE_LEVELS)


def role_level(role: Optional[str]) -> int:
    """Numeric level of a role; unknown roles rank 0."""
    return ROLE_LEVELS.get(role, 0)


def has_role(user: User, minimum: str) -> bool:
    return role_level(user.role) >= role_level(minimum)


def can_change_role(actor_role: str, target_role: str) -> bool:
    """True iff the target ranks strictly below the actor."""
    return role_level(target_role) < role_level(actor_role)


def is_protected(target: User, actor: User) -> bool:
    """The head admin account may only be acted on by itself."""
    head_email = get_settings().HEAD_ADMIN_EMAIL.lower()
    return (target.email or "").lower() == head_email and actor.id != target.id


def check_role_change(
    actor: User, target: User, new_role: str, restaurant_exists: Optional[bool] = None
) -> None:
    """Raise on the first violated rule, in a fixed order.

    `restaurant_exists` is None when no restaurant id was supplied.
    """
    if new_role not in VALID_ROLES:
        raise ValidationError("Invalid role", f"role must be one of: {', '.join(VALID_ROLES)}")
    if new_role == "manager" and not restaurant_exists:
        raise ValidationError(
            "Restaurant required",
            "a manager must be attached to an existing restaurant",
        )

    actor_level = role_level(actor.role)

    if not can_change_role(actor.role, target.role):
        raise ForbiddenError(
            "Insufficient rights",
            "you cannot change the role of a user whose role is equal to or higher than yours",
        )
    if role_level(new_role) >= actor_level:
        raise ForbiddenError(
            "Insufficient rights",
            "you cannot assign a role equal to or higher than your own",
        )
    if actor.role == "admin" and new_role == "admin":
        raise ForbiddenError("Insufficient rights", "only the head admin can appoint admins")
    if actor.role == "manager" and new_role != "user":
        raise ForbiddenError("Insufficient rights", "managers can only demote users to the user role")
    if is_protected(target, actor):
        raise ForbiddenError("Protected account", "the head admin account cannot be modified")


def check_block(actor: User, target: User, reason: Optional[str]) -> str:
    """Validate a block request and return the cleaned reason."""
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError("Block reason required", "reason must not be empty")
    if not can_change_role(actor.role, target.role):
        raise ForbiddenError(
            "Insufficient rights",
            "you cannot block a user whose role is equal to or higher than yours",
        )
    if is_protected(target, actor):
        raise ForbiddenError("Protected account", "the head admin account cannot be blocked")
    return cleaned
