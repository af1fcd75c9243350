"""Support API routes: tickets and message threads."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.encoders import jsonable_encoder

from restoreview.application.services import support_service
from restoreview.domain.models.user import User
from restoreview.domain.repositories.support_repository import SupportRepository
from restoreview.domain.schemas.support import (
    MessageCreate,
    MessageRead,
    TicketCreate,
    TicketDetail,
    TicketPriority,
    TicketRead,
    TicketStatus,
    TicketUpdate,
)
from restoreview.infrastructure.broadcast import NotificationBroadcaster, get_broadcaster
from restoreview.interfaces.api.deps import get_current_user
from restoreview.interfaces.deps import get_support_repository

router = APIRouter(prefix="/api/support", tags=["Support"])


@router.post("/tickets", response_model=TicketDetail, status_code=status.HTTP_201_CREATED)
def create_ticket(
    body: TicketCreate,
    background_tasks: BackgroundTasks,
    repo: SupportRepository = Depends(get_support_repository),
    broadcaster: NotificationBroadcaster = Depends(get_broadcaster),
    user: User = Depends(get_current_user),
):
    ticket = support_service.create_ticket(repo, user, body)
    background_tasks.add_task(broadcaster.publish, "new_support_ticket", {"ticket": jsonable_encoder(ticket)})
    return ticket


@router.get("/tickets", response_model=List[TicketRead])
def list_tickets(
    status: Optional[TicketStatus] = None,
    priority: Optional[TicketPriority] = None,
    repo: SupportRepository = Depends(get_support_repository),
    user: User = Depends(get_current_user),
):
    """Own tickets; staff see every ticket."""
    return support_service.list_tickets(repo, user, status, priority)


@router.get("/tickets/{ticket_id}", response_model=TicketDetail)
def get_ticket(
    ticket_id: int,
    repo: SupportRepository = Depends(get_support_repository),
    user: User = Depends(get_current_user),
):
    return support_service.get_ticket(repo, ticket_id, user)


@router.post("/tickets/{ticket_id}/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def add_message(
    ticket_id: int,
    body: MessageCreate,
    repo: SupportRepository = Depends(get_support_repository),
    user: User = Depends(get_current_user),
):
    return support_service.add_message(repo, ticket_id, user, body)


@router.patch("/tickets/{ticket_id}", response_model=TicketRead)
def update_ticket(
    ticket_id: int,
    body: TicketUpdate,
    repo: SupportRepository = Depends(get_support_repository),
    user: User = Depends(get_current_user),
):
    return support_service.update_ticket(repo, ticket_id, user, body)
