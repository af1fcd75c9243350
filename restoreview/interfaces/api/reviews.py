"""Review API routes: listing, creation (with photos), edits, votes and removal."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError as PydanticValidationError

from restoreview.application.services import moderation_service, review_service
from restoreview.config import get_settings
from restoreview.core.exceptions import ValidationError
from restoreview.domain.models.user import User
from restoreview.domain.repositories.notification_repository import NotificationRepository
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.domain.schemas.admin import ModerationResult
from restoreview.domain.schemas.review import (
    ReviewCreate,
    ReviewPage,
    ReviewRead,
    ReviewUpdate,
    VoteRequest,
    VoteResult,
)
from restoreview.infrastructure.broadcast import NotificationBroadcaster, get_broadcaster
from restoreview.infrastructure.photo_storage import PhotoStorage, get_photo_storage
from restoreview.interfaces.api.deps import get_current_user, get_optional_user
from restoreview.interfaces.deps import (
    get_notification_repository,
    get_restaurant_repository,
    get_review_repository,
)

settings = get_settings()
router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def _announce(background_tasks: BackgroundTasks, broadcaster: NotificationBroadcaster, review: ReviewRead):
    background_tasks.add_task(broadcaster.publish, "new_review", {"review": jsonable_encoder(review)})


@router.get("", response_model=ReviewPage)
def list_reviews(
    page: int = 1,
    limit: int = 20,
    user_id: Optional[int] = None,
    restaurant_id: Optional[int] = None,
    restaurant_name: Optional[str] = None,
    reviews: ReviewRepository = Depends(get_review_repository),
    viewer: Optional[User] = Depends(get_optional_user),
):
    return review_service.list_reviews(reviews, page, limit, user_id, restaurant_id, restaurant_name, viewer)


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
def create_review(
    body: ReviewCreate,
    background_tasks: BackgroundTasks,
    reviews: ReviewRepository = Depends(get_review_repository),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    notifications: NotificationRepository = Depends(get_notification_repository),
    broadcaster: NotificationBroadcaster = Depends(get_broadcaster),
    user: User = Depends(get_current_user),
):
    review = review_service.create_review(reviews, restaurants, notifications, user, body)
    _announce(background_tasks, broadcaster, review)
    return review


@router.post("/with-photos", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
async def create_review_with_photos(
    background_tasks: BackgroundTasks,
    rating: int = Form(...),
    comment: str = Form(...),
    restaurant_id: Optional[int] = Form(None),
    restaurant_name: Optional[str] = Form(None),
    review_type: str = Form("dine_in"),
    food_rating: int = Form(0),
    service_rating: int = Form(0),
    atmosphere_rating: int = Form(0),
    price_rating: int = Form(0),
    cleanliness_rating: int = Form(0),
    delivery_speed_rating: int = Form(0),
    delivery_quality_rating: int = Form(0),
    photos: List[UploadFile] = File(default=[]),
    reviews: ReviewRepository = Depends(get_review_repository),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    notifications: NotificationRepository = Depends(get_notification_repository),
    storage: PhotoStorage = Depends(get_photo_storage),
    broadcaster: NotificationBroadcaster = Depends(get_broadcaster),
    user: User = Depends(get_current_user),
):
    try:
        data = ReviewCreate(
            restaurant_id=restaurant_id,
            restaurant_name=restaurant_name,
            review_type=review_type,
            rating=rating,
            food_rating=food_rating,
            service_rating=service_rating,
            atmosphere_rating=atmosphere_rating,
            price_rating=price_rating,
            cleanliness_rating=cleanliness_rating,
            delivery_speed_rating=delivery_speed_rating,
            delivery_quality_rating=delivery_quality_rating,
            comment=comment,
        )
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid request", "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        )

    files = [(photo.filename, photo.content_type, await photo.read()) for photo in photos]
    review = review_service.create_review_with_photos(
        reviews, restaurants, notifications, storage, user, data, files, settings.MAX_REVIEW_PHOTOS
    )
    _announce(background_tasks, broadcaster, review)
    return review


@router.post("/vote", response_model=VoteResult)
def vote(
    body: VoteRequest,
    reviews: ReviewRepository = Depends(get_review_repository),
    user: User = Depends(get_current_user),
):
    return review_service.vote(reviews, body.review_id, user, body.vote_type)


@router.get("/{review_id}", response_model=ReviewRead)
def get_review(
    review_id: int,
    reviews: ReviewRepository = Depends(get_review_repository),
    viewer: Optional[User] = Depends(get_optional_user),
):
    return review_service.get_review(reviews, review_id, viewer)


@router.put("/{review_id}", response_model=ReviewRead)
def update_review(
    review_id: int,
    body: ReviewUpdate,
    reviews: ReviewRepository = Depends(get_review_repository),
    user: User = Depends(get_current_user),
):
    return review_service.update_review(reviews, review_id, user, body)


@router.delete("/{review_id}", response_model=ModerationResult)
def delete_review(
    review_id: int,
    reviews: ReviewRepository = Depends(get_review_repository),
    user: User = Depends(get_current_user),
):
    return moderation_service.withdraw_review(reviews, review_id, user)
