"""Review service: creation, listing, updates and votes."""

from typing import Any, Dict, List, Optional, Tuple

import structlog

from restoreview.application.services.role_policy import has_role
from restoreview.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from restoreview.domain.models.notification import Notification
from restoreview.domain.models.restaurant import Restaurant
from restoreview.domain.models.review import Review
from restoreview.domain.models.user import User
from restoreview.domain.repositories.notification_repository import NotificationRepository
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.domain.schemas.review import ReviewCreate, ReviewRead, ReviewUpdate, VoteResult
from restoreview.infrastructure.photo_storage import PhotoStorage

logger = structlog.get_logger(__name__)

VOTE_DELTAS = {"up": 1, "down": -1}


def to_read(review: Review, user_vote: Optional[str] = None) -> ReviewRead:
    return ReviewRead(
        id=review.id,
        user_id=review.user_id,
        author_name=review.author.name if review.author else None,
        restaurant_id=review.restaurant_id,
        restaurant_name=review.restaurant_name,
        review_type=review.review_type,
        rating=review.rating,
        food_rating=review.food_rating,
        service_rating=review.service_rating,
        atmosphere_rating=review.atmosphere_rating,
        price_rating=review.price_rating,
        cleanliness_rating=review.cleanliness_rating,
        delivery_speed_rating=review.delivery_speed_rating,
        delivery_quality_rating=review.delivery_quality_rating,
        comment=review.comment,
        likes=review.likes or 0,
        response=review.response,
        response_date=review.response_date,
        manager_name=review.manager_name,
        photos=[p.photo_url for p in review.photos],
        user_vote=user_vote,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


def _resolve_restaurant(restaurants: RestaurantRepository, data: ReviewCreate) -> Restaurant:
    if data.restaurant_id is not None:
        restaurant = restaurants.get_by_id(data.restaurant_id)
    else:
        restaurant = restaurants.get_by_name(data.restaurant_name)
    if restaurant is None or not restaurant.is_active:
        raise NotFoundError(
            "Restaurant not found",
            f"restaurant {data.restaurant_id or data.restaurant_name!r} does not exist",
        )
    return restaurant


def create_review(
    reviews: ReviewRepository,
    restaurants: RestaurantRepository,
    notifications: NotificationRepository,
    author: User,
    data: ReviewCreate,
    photo_urls: Optional[List[str]] = None,
) -> ReviewRead:
    """Persist a review and its photos as one unit, then notify the author."""
    restaurant = _resolve_restaurant(restaurants, data)

    review = Review(
        user_id=author.id,
        restaurant_id=restaurant.id,
        restaurant_name=restaurant.name,
        likes=0,
        deleted=False,
        **data.model_dump(exclude={"restaurant_id", "restaurant_name"}),
    )
    review = reviews.add_with_photos(review, photo_urls or [])

    notifications.create(
        Notification(
            user_id=author.id,
            message=f"Your review of {restaurant.name} has been published",
            type="review",
        )
    )
    logger.info(
        "Review created",
        review_id=review.id,
        user_id=author.id,
        restaurant_id=restaurant.id,
        photos=len(photo_urls or []),
    )
    return to_read(review)


def create_review_with_photos(
    reviews: ReviewRepository,
    restaurants: RestaurantRepository,
    notifications: NotificationRepository,
    storage: PhotoStorage,
    author: User,
    data: ReviewCreate,
    files: List[Tuple[Optional[str], Optional[str], bytes]],
    max_photos: int,
) -> ReviewRead:
    """Validate and store uploaded images, then create the review.

    `files` holds (filename, content_type, content) triples. Stored files are
    removed again if the review cannot be written.
    """
    if len(files) > max_photos:
        raise ValidationError("Too many photos", f"at most {max_photos} photos per review")
    for filename, content_type, content in files:
        storage.validate(filename, content_type, len(content))

    urls: List[str] = []
    try:
        for _, content_type, content in files:
            urls.append(storage.save("reviews", content_type, content))
        return create_review(reviews, restaurants, notifications, author, data, urls)
    except Exception:
        for url in urls:
            storage.remove(url)
        raise


def list_reviews(
    reviews: ReviewRepository,
    page: int = 1,
    limit: int = 20,
    user_id: Optional[int] = None,
    restaurant_id: Optional[int] = None,
    restaurant_name: Optional[str] = None,
    viewer: Optional[User] = None,
) -> Dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    items, total = reviews.list_visible(page, limit, user_id, restaurant_id, restaurant_name)
    votes = reviews.get_user_votes([r.id for r in items], viewer.id) if viewer else {}
    return {
        "items": [to_read(r, votes.get(r.id)) for r in items],
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": (total + limit - 1) // limit,
    }


def get_visible_review(reviews: ReviewRepository, review_id: int) -> Review:
    review = reviews.get_visible(review_id)
    if review is None:
        raise NotFoundError("Review not found", f"review {review_id} does not exist")
    return review


def get_review(reviews: ReviewRepository, review_id: int, viewer: Optional[User] = None) -> ReviewRead:
    review = get_visible_review(reviews, review_id)
    vote = reviews.get_user_votes([review.id], viewer.id).get(review.id) if viewer else None
    return to_read(review, vote)


def update_review(reviews: ReviewRepository, review_id: int, actor: User, data: ReviewUpdate) -> ReviewRead:
    review = get_visible_review(reviews, review_id)
    if review.user_id != actor.id and not has_role(actor, "admin"):
        raise ForbiddenError("Access denied", "only the author or an admin can edit this review")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("Nothing to update")
    review = reviews.update(review, changes)
    logger.info("Review updated", review_id=review.id, actor_id=actor.id, fields=sorted(changes))
    return to_read(review)


def vote(reviews: ReviewRepository, review_id: int, user: User, vote_type: str) -> VoteResult:
    """Record a single up/down vote per user per review.

    A repeated vote is reported as not recorded rather than as an error; the
    vote row and the likes delta commit together or not at all.
    """
    if vote_type not in VOTE_DELTAS:
        raise ValidationError("Invalid vote type", "vote_type must be 'up' or 'down'")

    review = get_visible_review(reviews, review_id)
    if review.user_id == user.id:
        raise ValidationError("Cannot vote", "you cannot vote for your own review")

    recorded = reviews.record_vote(review_id, user.id, vote_type, VOTE_DELTAS[vote_type])
    review = get_visible_review(reviews, review_id)
    existing = reviews.get_user_votes([review_id], user.id).get(review_id)

    if not recorded:
        logger.info("Duplicate vote ignored", review_id=review_id, user_id=user.id)
        return VoteResult(recorded=False, message="already voted", likes=review.likes, user_vote=existing)

    logger.info("Vote recorded", review_id=review_id, user_id=user.id, vote_type=vote_type)
    return VoteResult(recorded=True, message="vote recorded", likes=review.likes, user_vote=existing)
