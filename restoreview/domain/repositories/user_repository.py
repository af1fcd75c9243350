"""
User Repository Interface.
"""

from typing import List, Optional, Tuple

from restoreview.domain.models.user import User
from restoreview.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def list_users(self, role: Optional[str], limit: int, offset: int) -> Tuple[List[User], int]:
        """Users ordered newest first, plus the total matching count."""
        ...
