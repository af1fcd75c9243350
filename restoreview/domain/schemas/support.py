"""Pydantic schemas for support tickets."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

TicketStatus = Literal["open", "in_progress", "closed"]
TicketPriority = Literal["low", "medium", "high"]


class TicketCreate(BaseModel):
    subject: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1, max_length=5000)
    priority: TicketPriority = "medium"

    @field_validator("subject", "message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class MessageCreate(BaseModel):
    message: str = Field(min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class TicketUpdate(BaseModel):
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None


class MessageRead(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    author_name: Optional[str] = None
    message: str
    is_staff: bool
    created_at: Optional[datetime] = None


class TicketRead(BaseModel):
    id: int
    user_id: int
    author_name: Optional[str] = None
    subject: str
    message: str
    status: str
    priority: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TicketDetail(TicketRead):
    messages: list[MessageRead] = []
