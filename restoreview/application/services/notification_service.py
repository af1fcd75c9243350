"""Notification service: per-user inbox."""

from typing import Optional

import structlog

from restoreview.application.services.role_policy import has_role
from restoreview.core.exceptions import ForbiddenError, NotFoundError
from restoreview.domain.models.notification import Notification
from restoreview.domain.models.user import User
from restoreview.domain.repositories.notification_repository import NotificationRepository
from restoreview.domain.repositories.user_repository import UserRepository
from restoreview.domain.schemas.notification import NotificationCreate, NotificationList, NotificationRead

logger = structlog.get_logger(__name__)


def list_notifications(repo: NotificationRepository, user: User, limit: int = 50) -> NotificationList:
    items = repo.list_for_user(user.id, min(max(limit, 1), 200))
    return NotificationList(
        items=[NotificationRead.model_validate(n) for n in items],
        unread_count=repo.unread_count(user.id),
    )


def create_notification(
    repo: NotificationRepository, users: UserRepository, actor: User, data: NotificationCreate
) -> Notification:
    target_id: Optional[int] = data.user_id or actor.id
    if target_id != actor.id:
        if not has_role(actor, "admin"):
            raise ForbiddenError("Insufficient rights", "only admins can notify other users")
        if users.get_by_id(target_id) is None:
            raise NotFoundError("User not found", f"user {target_id} does not exist")

    notification = repo.create(Notification(user_id=target_id, message=data.message, type=data.type))
    logger.info("Notification created", notification_id=notification.id, user_id=target_id, actor_id=actor.id)
    return notification


def _owned(repo: NotificationRepository, notification_id: int, user: User) -> Notification:
    notification = repo.get_by_id(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != user.id:
        raise ForbiddenError("Insufficient rights", "this notification belongs to another user")
    return notification


def mark_read(repo: NotificationRepository, notification_id: int, user: User) -> Notification:
    notification = _owned(repo, notification_id, user)
    notification.is_read = True
    return repo.save(notification)


def delete_notification(repo: NotificationRepository, notification_id: int, user: User) -> None:
    _owned(repo, notification_id, user)
    repo.delete(notification_id)
