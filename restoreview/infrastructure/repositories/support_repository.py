"""
SQLAlchemy Implementation of Support Repository.
"""

from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError

from restoreview.domain.models.support import SupportMessage, SupportTicket
from restoreview.domain.repositories.support_repository import SupportRepository
from restoreview.infrastructure.repositories.base_repository import SQLAlchemyRepository

STATUS_ORDER = case(
    (SupportTicket.status == "open", 0),
    (SupportTicket.status == "in_progress", 1),
    else_=2,
)
PRIORITY_ORDER = case(
    (SupportTicket.priority == "high", 0),
    (SupportTicket.priority == "medium", 1),
    else_=2,
)


class SQLAlchemySupportRepository(SQLAlchemyRepository[SupportTicket], SupportRepository):
    """Support repository implementation using SQLAlchemy."""

    def list_tickets(
        self,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[SupportTicket]:
        query = self.db.query(SupportTicket)
        if user_id is not None:
            query = query.filter(SupportTicket.user_id == user_id)
        if status:
            query = query.filter(SupportTicket.status == status)
        if priority:
            query = query.filter(SupportTicket.priority == priority)
        return query.order_by(
            STATUS_ORDER, PRIORITY_ORDER, SupportTicket.created_at.desc(), SupportTicket.id.desc()
        ).all()

    def create_ticket(self, ticket: SupportTicket) -> SupportTicket:
        try:
            self.db.add(ticket)
            self.db.flush()
            self.db.add(
                SupportMessage(ticket_id=ticket.id, user_id=ticket.user_id, message=ticket.message)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(ticket)
        return ticket

    def add_message(self, ticket: SupportTicket, message: SupportMessage) -> SupportMessage:
        try:
            self.db.add(message)
            ticket.updated_at = func.now()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(message)
        self.db.refresh(ticket)
        return message
