"""Admin API routes: users, roles, blocking and review moderation."""

from typing import Optional

from fastapi import APIRouter, Depends

from restoreview.application.services import admin_service, moderation_service
from restoreview.domain.models.user import User
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.domain.repositories.user_repository import UserRepository
from restoreview.domain.schemas.admin import (
    BlockRequest,
    DeletedReviewDetail,
    DeletedReviewPage,
    DeleteReviewRequest,
    ModerationResult,
    RoleUpdateRequest,
    UserPage,
)
from restoreview.domain.schemas.auth import UserRead
from restoreview.interfaces.api.deps import require_admin, require_manager
from restoreview.interfaces.deps import get_restaurant_repository, get_review_repository, get_user_repository

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/users", response_model=UserPage)
def list_users(
    role: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    users: UserRepository = Depends(get_user_repository),
    actor: User = Depends(require_admin),
):
    return admin_service.list_users(users, role, limit, offset)


@router.put("/users/{user_id}/role", response_model=UserRead)
def update_role(
    user_id: int,
    body: RoleUpdateRequest,
    users: UserRepository = Depends(get_user_repository),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    actor: User = Depends(require_admin),
):
    target = admin_service.update_user_role(users, restaurants, actor, user_id, body.role, body.restaurant_id)
    return UserRead.model_validate(target)


@router.post("/users/{user_id}/block", response_model=UserRead)
def block_user(
    user_id: int,
    body: Optional[BlockRequest] = None,
    users: UserRepository = Depends(get_user_repository),
    actor: User = Depends(require_admin),
):
    target = admin_service.block_user(users, actor, user_id, body.reason if body else None)
    return UserRead.model_validate(target)


@router.post("/users/{user_id}/unblock", response_model=UserRead)
def unblock_user(
    user_id: int,
    users: UserRepository = Depends(get_user_repository),
    actor: User = Depends(require_admin),
):
    return UserRead.model_validate(admin_service.unblock_user(users, actor, user_id))


@router.delete("/reviews/{review_id}", response_model=ModerationResult)
def delete_review(
    review_id: int,
    body: Optional[DeleteReviewRequest] = None,
    reviews: ReviewRepository = Depends(get_review_repository),
    moderator: User = Depends(require_manager),
):
    return moderation_service.delete_review(reviews, review_id, body.reason if body else None, moderator)


@router.get("/reviews/deleted", response_model=DeletedReviewPage)
def list_deleted_reviews(
    page: int = 1,
    limit: int = 20,
    deleted_by: Optional[int] = None,
    reviews: ReviewRepository = Depends(get_review_repository),
    actor: User = Depends(require_admin),
):
    return moderation_service.list_deleted_reviews(reviews, page, limit, deleted_by)


@router.get("/reviews/deleted/{audit_id}", response_model=DeletedReviewDetail)
def get_deleted_review(
    audit_id: int,
    reviews: ReviewRepository = Depends(get_review_repository),
    actor: User = Depends(require_admin),
):
    return moderation_service.get_deleted_review(reviews, audit_id)
