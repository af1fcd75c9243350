"""Pydantic schemas for in-app notifications."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NotificationCreate(BaseModel):
    message: str = Field(min_length=1, max_length=1000)
    type: str = Field(default="info", max_length=50)
    user_id: Optional[int] = None  # admin+ may address another user


class NotificationRead(BaseModel):
    id: int
    user_id: int
    message: str
    type: str
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotificationList(BaseModel):
    items: list[NotificationRead]
    unread_count: int
