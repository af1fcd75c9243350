"""Notification API routes: own inbox."""

from fastapi import APIRouter, Depends, status

from restoreview.application.services import notification_service
from restoreview.domain.models.user import User
from restoreview.domain.repositories.notification_repository import NotificationRepository
from restoreview.domain.repositories.user_repository import UserRepository
from restoreview.domain.schemas.notification import NotificationCreate, NotificationList, NotificationRead
from restoreview.interfaces.api.deps import get_current_user
from restoreview.interfaces.deps import get_notification_repository, get_user_repository

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationList)
def list_notifications(
    limit: int = 50,
    repo: NotificationRepository = Depends(get_notification_repository),
    user: User = Depends(get_current_user),
):
    return notification_service.list_notifications(repo, user, limit)


@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    body: NotificationCreate,
    repo: NotificationRepository = Depends(get_notification_repository),
    users: UserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    return notification_service.create_notification(repo, users, user, body)


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    repo: NotificationRepository = Depends(get_notification_repository),
    user: User = Depends(get_current_user),
):
    return notification_service.mark_read(repo, notification_id, user)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    repo: NotificationRepository = Depends(get_notification_repository),
    user: User = Depends(get_current_user),
):
    notification_service.delete_notification(repo, notification_id, user)
