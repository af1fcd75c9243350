"""Pydantic schemas for the admin surface: roles, blocking and moderation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from restoreview.domain.schemas.auth import UserRead


class RoleUpdateRequest(BaseModel):
    role: str
    restaurant_id: Optional[int] = None


# Reasons are optional at the schema level; blank ones are rejected by the
# policy layer with the uniform error shape.
class BlockRequest(BaseModel):
    reason: Optional[str] = None


class DeleteReviewRequest(BaseModel):
    reason: Optional[str] = None


class UserPage(BaseModel):
    items: list[UserRead]
    total: int
    limit: int
    offset: int


class DeletedReviewRead(BaseModel):
    id: int
    review_id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    restaurant_id: Optional[int] = None
    restaurant_name: str
    review_type: Optional[str] = None
    rating: int
    food_rating: Optional[int] = 0
    service_rating: Optional[int] = 0
    atmosphere_rating: Optional[int] = 0
    price_rating: Optional[int] = 0
    cleanliness_rating: Optional[int] = 0
    delivery_speed_rating: Optional[int] = 0
    delivery_quality_rating: Optional[int] = 0
    comment: str
    original_created_at: Optional[datetime] = None
    deleted_by: Optional[int] = None
    deletion_reason: str
    admin_name: Optional[str] = None
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DeletedReviewPage(BaseModel):
    items: list[DeletedReviewRead]
    total: int
    page: int
    limit: int
    total_pages: int


class DeletedReviewDetail(DeletedReviewRead):
    live_state: str  # deleted, active, missing


class ModerationResult(BaseModel):
    review_id: int
    deleted: bool = True
    audit_recorded: bool
    message: str
