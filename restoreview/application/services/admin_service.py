"""Admin service: role assignment, blocking and user listing."""

from typing import Any, Dict, Optional

import structlog

from restoreview.application.services.role_policy import check_block, check_role_change
from restoreview.core.exceptions import NotFoundError, ValidationError
from restoreview.domain.models.user import User
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.repositories.user_repository import UserRepository
from restoreview.domain.schemas.auth import UserRead

logger = structlog.get_logger(__name__)


def _get_target(users: UserRepository, user_id: int) -> User:
    target = users.get_by_id(user_id)
    if target is None:
        raise NotFoundError("User not found", f"user {user_id} does not exist")
    return target


def list_users(
    users: UserRepository, role: Optional[str] = None, limit: int = 50, offset: int = 0
) -> Dict[str, Any]:
    limit = min(max(limit, 1), 1000)
    offset = max(offset, 0)
    items, total = users.list_users(role, limit, offset)
    return {
        "items": [UserRead.model_validate(u) for u in items],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


def update_user_role(
    users: UserRepository,
    restaurants: RestaurantRepository,
    actor: User,
    target_id: int,
    new_role: str,
    restaurant_id: Optional[int] = None,
) -> User:
    target = _get_target(users, target_id)

    restaurant_exists = None
    if new_role == "manager" and restaurant_id is not None:
        restaurant_exists = restaurants.get_by_id(restaurant_id) is not None
        if not restaurant_exists:
            raise ValidationError("Restaurant not found", f"restaurant {restaurant_id} does not exist")

    check_role_change(actor, target, new_role, restaurant_exists)

    old_role = target.role
    target.role = new_role
    target.restaurant_id = restaurant_id if new_role == "manager" else None
    target = users.save(target)

    logger.info(
        "User role changed",
        actor_id=actor.id,
        target_id=target.id,
        old_role=old_role,
        new_role=new_role,
        restaurant_id=target.restaurant_id,
    )
    return target


def block_user(users: UserRepository, actor: User, target_id: int, reason: Optional[str]) -> User:
    target = _get_target(users, target_id)
    cleaned = check_block(actor, target, reason)

    target.is_blocked = True
    target.blocked_reason = cleaned
    target = users.save(target)

    logger.info("User blocked", actor_id=actor.id, target_id=target.id, reason=cleaned)
    return target


def unblock_user(users: UserRepository, actor: User, target_id: int) -> User:
    # Only existence is checked here; the route itself is restricted to admin+.
    target = _get_target(users, target_id)

    target.is_blocked = False
    target.blocked_reason = None
    target = users.save(target)

    logger.info("User unblocked", actor_id=actor.id, target_id=target.id)
    return target
