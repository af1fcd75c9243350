"""Manager service: assigned restaurants, scoped review listing, replies and analytics."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytz
import structlog

from restoreview.application.services import restaurant_service
from restoreview.application.services.review_service import get_visible_review, list_reviews, to_read
from restoreview.application.services.role_policy import has_role
from restoreview.config import get_settings
from restoreview.core.exceptions import ForbiddenError, ValidationError
from restoreview.domain.models.notification import Notification
from restoreview.domain.models.user import User
from restoreview.domain.repositories.notification_repository import NotificationRepository
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.domain.schemas.restaurant import RestaurantRead
from restoreview.domain.schemas.review import ReviewRead

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)
logger = structlog.get_logger(__name__)


def scope_restaurant(actor: User, restaurant_id: Optional[int] = None) -> Optional[int]:
    """Managers are pinned to their own restaurant; admins may pick any or none."""
    if has_role(actor, "admin"):
        return restaurant_id
    if actor.restaurant_id is None:
        raise ForbiddenError("No restaurant assigned", "this manager account is not attached to a restaurant")
    return actor.restaurant_id


def list_manager_restaurants(restaurants: RestaurantRepository, actor: User) -> List[RestaurantRead]:
    """The manager's own restaurant with live rating figures; admins get the whole catalogue."""
    if has_role(actor, "admin"):
        return restaurant_service.list_restaurants(restaurants, include_inactive=True)
    return [restaurant_service.get_restaurant(restaurants, scope_restaurant(actor))]


def list_manager_reviews(
    reviews: ReviewRepository,
    actor: User,
    restaurant_id: Optional[int] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    return list_reviews(reviews, page=page, limit=limit, restaurant_id=scope_restaurant(actor, restaurant_id))


def respond_to_review(
    reviews: ReviewRepository,
    notifications: NotificationRepository,
    review_id: int,
    manager: User,
    text: str,
) -> ReviewRead:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Response text is required")

    review = get_visible_review(reviews, review_id)
    if not has_role(manager, "admin") and (
        manager.restaurant_id is None or manager.restaurant_id != review.restaurant_id
    ):
        raise ForbiddenError("Access denied", "you can only respond to reviews of your own restaurant")

    review.response = text
    review.response_date = datetime.now(timezone.utc)
    review.responded_by = manager.id
    review.manager_name = manager.name
    review = reviews.save(review)

    notifications.create(
        Notification(
            user_id=review.user_id,
            message=f"{review.restaurant_name} replied to your review",
            type="response",
        )
    )
    logger.info("Review response saved", review_id=review.id, manager_id=manager.id)
    return to_read(review)


def get_stats(reviews: ReviewRepository, actor: User, restaurant_id: Optional[int] = None) -> Dict[str, Any]:
    scope = scope_restaurant(actor, restaurant_id)
    stats = reviews.get_stats(scope)
    stats["restaurant_id"] = scope
    return stats


def get_charts(
    reviews: ReviewRepository, actor: User, days: int = 30, restaurant_id: Optional[int] = None
) -> Dict[str, Any]:
    """Rating distribution and reviews per local day for the last N days."""
    scope = scope_restaurant(actor, restaurant_id)
    days = min(max(days, 1), 365)

    today = datetime.now(tz).date()
    start_day = today - timedelta(days=days - 1)
    start_local = tz.localize(datetime.combine(start_day, datetime.min.time()))
    # Timestamps are stored as naive UTC
    since = start_local.astimezone(pytz.utc).replace(tzinfo=None)

    buckets = {(start_day + timedelta(days=i)).isoformat(): 0 for i in range(days)}
    for created_at in reviews.get_created_since(since, scope):
        if created_at.tzinfo is None:
            created_at = pytz.utc.localize(created_at)
        key = created_at.astimezone(tz).date().isoformat()
        if key in buckets:
            buckets[key] += 1

    distribution = reviews.get_rating_distribution(scope)
    return {
        "restaurant_id": scope,
        "rating_distribution": [{"rating": r, "count": distribution[r]} for r in range(1, 6)],
        "reviews_per_day": [{"date": d, "count": c} for d, c in buckets.items()],
    }
