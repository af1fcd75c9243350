"""
Notification Repository Interface.
"""

from typing import List

from restoreview.domain.models.notification import Notification
from restoreview.domain.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Interface for Notification-specific operations."""

    def list_for_user(self, user_id: int, limit: int = 50) -> List[Notification]:
        ...

    def unread_count(self, user_id: int) -> int:
        ...
