"""Manager API routes: assigned restaurants, own-restaurant reviews, replies and analytics."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from restoreview.application.services import manager_service
from restoreview.domain.models.user import User
from restoreview.domain.repositories.notification_repository import NotificationRepository
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.domain.schemas.restaurant import RestaurantRead
from restoreview.domain.schemas.review import ResponseRequest, ReviewPage, ReviewRead
from restoreview.interfaces.api.deps import require_manager
from restoreview.interfaces.deps import (
    get_notification_repository,
    get_restaurant_repository,
    get_review_repository,
)

router = APIRouter(prefix="/api/manager", tags=["Manager"])


@router.get("/restaurants", response_model=List[RestaurantRead])
def manager_restaurants(
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    manager: User = Depends(require_manager),
):
    return manager_service.list_manager_restaurants(restaurants, manager)


@router.get("/reviews", response_model=ReviewPage)
def manager_reviews(
    restaurant_id: Optional[int] = None,
    page: int = 1,
    limit: int = 20,
    reviews: ReviewRepository = Depends(get_review_repository),
    manager: User = Depends(require_manager),
):
    return manager_service.list_manager_reviews(reviews, manager, restaurant_id, page, limit)


@router.post("/reviews/{review_id}/response", response_model=ReviewRead)
def respond(
    review_id: int,
    body: ResponseRequest,
    reviews: ReviewRepository = Depends(get_review_repository),
    notifications: NotificationRepository = Depends(get_notification_repository),
    manager: User = Depends(require_manager),
):
    return manager_service.respond_to_review(reviews, notifications, review_id, manager, body.response)


@router.get("/analytics/stats")
def analytics_stats(
    restaurant_id: Optional[int] = None,
    reviews: ReviewRepository = Depends(get_review_repository),
    manager: User = Depends(require_manager),
):
    return manager_service.get_stats(reviews, manager, restaurant_id)


@router.get("/analytics/charts")
def analytics_charts(
    days: int = 30,
    restaurant_id: Optional[int] = None,
    reviews: ReviewRepository = Depends(get_review_repository),
    manager: User = Depends(require_manager),
):
    return manager_service.get_charts(reviews, manager, days, restaurant_id)
