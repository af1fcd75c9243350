"""Support service: tickets and their message threads."""

from typing import List, Optional

import structlog

from restoreview.application.services.role_policy import has_role
from restoreview.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from restoreview.domain.models.support import SupportMessage, SupportTicket
from restoreview.domain.models.user import User
from restoreview.domain.repositories.support_repository import SupportRepository
from restoreview.domain.schemas.support import (
    MessageCreate,
    MessageRead,
    TicketCreate,
    TicketDetail,
    TicketRead,
    TicketUpdate,
)

logger = structlog.get_logger(__name__)

STAFF_ROLE = "manager"


def is_staff(user: User) -> bool:
    return has_role(user, STAFF_ROLE)


def to_read(ticket: SupportTicket) -> TicketRead:
    return TicketRead(
        id=ticket.id,
        user_id=ticket.user_id,
        author_name=ticket.author.name if ticket.author else None,
        subject=ticket.subject,
        message=ticket.message,
        status=ticket.status,
        priority=ticket.priority,
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
    )


def message_to_read(message: SupportMessage) -> MessageRead:
    return MessageRead(
        id=message.id,
        ticket_id=message.ticket_id,
        user_id=message.user_id,
        author_name=message.author.name if message.author else None,
        message=message.message,
        is_staff=message.is_staff,
        created_at=message.created_at,
    )


def to_detail(ticket: SupportTicket) -> TicketDetail:
    return TicketDetail(
        **to_read(ticket).model_dump(),
        messages=[message_to_read(m) for m in ticket.messages],
    )


def _accessible(repo: SupportRepository, ticket_id: int, user: User) -> SupportTicket:
    ticket = repo.get_by_id(ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket not found", f"ticket {ticket_id} does not exist")
    if ticket.user_id != user.id and not is_staff(user):
        raise ForbiddenError("Access denied", "this ticket belongs to another user")
    return ticket


def create_ticket(repo: SupportRepository, user: User, data: TicketCreate) -> TicketDetail:
    ticket = repo.create_ticket(
        SupportTicket(
            user_id=user.id,
            subject=data.subject,
            message=data.message,
            priority=data.priority,
            status="open",
        )
    )
    logger.info("Support ticket created", ticket_id=ticket.id, user_id=user.id, priority=ticket.priority)
    return to_detail(ticket)


def list_tickets(
    repo: SupportRepository,
    user: User,
    status: Optional[str] = None,
    priority: Optional[str] = None,
) -> List[TicketRead]:
    owner = None if is_staff(user) else user.id
    return [to_read(t) for t in repo.list_tickets(owner, status, priority)]


def get_ticket(repo: SupportRepository, ticket_id: int, user: User) -> TicketDetail:
    return to_detail(_accessible(repo, ticket_id, user))


def add_message(repo: SupportRepository, ticket_id: int, user: User, data: MessageCreate) -> MessageRead:
    ticket = _accessible(repo, ticket_id, user)
    staff = is_staff(user)

    if ticket.status == "closed" and not staff:
        raise ForbiddenError("Ticket closed", "closed tickets do not accept new messages")
    if staff and ticket.status == "open":
        ticket.status = "in_progress"

    message = repo.add_message(
        ticket,
        SupportMessage(ticket_id=ticket.id, user_id=user.id, message=data.message, is_staff=staff),
    )
    logger.info("Support message added", ticket_id=ticket.id, user_id=user.id, staff=staff)
    return message_to_read(message)


def update_ticket(repo: SupportRepository, ticket_id: int, user: User, data: TicketUpdate) -> TicketRead:
    if not is_staff(user):
        raise ForbiddenError("Access denied", "only support staff can change ticket status or priority")
    ticket = _accessible(repo, ticket_id, user)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("Nothing to update", "provide status and/or priority")
    ticket = repo.update(ticket, changes)
    logger.info("Support ticket updated", ticket_id=ticket.id, actor_id=user.id, **changes)
    return to_read(ticket)
