"""
Support Repository Interface.
"""

from typing import List, Optional

from restoreview.domain.models.support import SupportMessage, SupportTicket
from restoreview.domain.repositories.base import BaseRepository


class SupportRepository(BaseRepository[SupportTicket]):
    """Interface for support ticket operations."""

    def list_tickets(
        self,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[SupportTicket]:
        """Tickets ordered open, in_progress, closed then by priority and recency."""
        ...

    def create_ticket(self, ticket: SupportTicket) -> SupportTicket:
        """Insert the ticket together with its opening message."""
        ...

    def add_message(self, ticket: SupportTicket, message: SupportMessage) -> SupportMessage:
        """Append a message, bumping the ticket's updated_at."""
        ...
