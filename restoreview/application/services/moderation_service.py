"""Moderation service: soft-deleting reviews with an audit copy.

A moderation delete writes the audit copy and flags the live row in one
transaction. If the audit write fails the transaction is rolled back, the
full review snapshot is logged at error level, and the live row is flagged
on its own so the moderation action still takes effect. A row that was
flagged by someone else in the meantime is reported as not found and leaves
no audit copy behind.
"""

from typing import Any, Dict, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from restoreview.application.services.role_policy import has_role
from restoreview.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from restoreview.domain.models.deleted_review import DeletedReview
from restoreview.domain.models.review import Review
from restoreview.domain.models.user import User
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.domain.schemas.admin import DeletedReviewDetail, DeletedReviewRead, ModerationResult

logger = structlog.get_logger(__name__)

SNAPSHOT_FIELDS = (
    "user_id",
    "restaurant_id",
    "restaurant_name",
    "review_type",
    "rating",
    "food_rating",
    "service_rating",
    "atmosphere_rating",
    "price_rating",
    "cleanliness_rating",
    "delivery_speed_rating",
    "delivery_quality_rating",
    "comment",
)

AUTHOR_REASON = "Deleted by author"
STAFF_REASON = "Deleted by staff"


def snapshot(review: Review) -> Dict[str, Any]:
    data = {field: getattr(review, field) for field in SNAPSHOT_FIELDS}
    data["review_id"] = review.id
    data["user_name"] = review.author.name if review.author else None
    data["original_created_at"] = review.created_at
    return data


def delete_review(
    reviews: ReviewRepository, review_id: int, reason: Optional[str], moderator: User
) -> ModerationResult:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError("Deletion reason required", "reason must not be empty")

    review = reviews.get_visible(review_id)
    if review is None:
        raise NotFoundError("Review not found", f"review {review_id} does not exist or is already deleted")

    data = snapshot(review)
    audit = DeletedReview(
        **data,
        deleted_by=moderator.id,
        deletion_reason=cleaned,
        admin_name=moderator.name,
    )

    try:
        flagged = reviews.soft_delete(review, audit)
    except SQLAlchemyError as e:
        logger.error(
            "Audit copy write failed, flagging review without audit",
            review_id=review_id,
            moderator_id=moderator.id,
            reason=cleaned,
            error=str(e),
            snapshot={k: str(v) if v is not None else None for k, v in data.items()},
        )
        if not reviews.flag_deleted(review_id):
            raise NotFoundError("Review not found", f"review {review_id} was deleted concurrently")
        return ModerationResult(
            review_id=review_id,
            audit_recorded=False,
            message="Review deleted; audit copy could not be recorded",
        )

    if not flagged:
        logger.info("Review already deleted, audit copy discarded", review_id=review_id, moderator_id=moderator.id)
        raise NotFoundError("Review not found", f"review {review_id} was deleted concurrently")

    logger.info("Review deleted", review_id=review_id, moderator_id=moderator.id, reason=cleaned)
    return ModerationResult(review_id=review_id, audit_recorded=True, message="Review deleted")


def withdraw_review(reviews: ReviewRepository, review_id: int, actor: User) -> ModerationResult:
    """Soft-delete from the review endpoint: the author, or any staff member.

    Goes through the same audited path as moderation, with a fixed reason.
    """
    review = reviews.get_visible(review_id)
    if review is None:
        raise NotFoundError("Review not found", f"review {review_id} does not exist or is already deleted")

    if review.user_id == actor.id:
        reason = AUTHOR_REASON
    elif has_role(actor, "manager"):
        reason = STAFF_REASON
    else:
        raise ForbiddenError("Access denied", "you cannot delete another user's review")

    return delete_review(reviews, review_id, reason, actor)


def list_deleted_reviews(
    reviews: ReviewRepository, page: int = 1, limit: int = 20, deleted_by: Optional[int] = None
) -> Dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    rows, total = reviews.list_deleted(page, limit, deleted_by)

    items = []
    for audit, author_name, moderator_name in rows:
        item = DeletedReviewRead.model_validate(audit)
        item.user_name = author_name or audit.user_name
        item.admin_name = moderator_name or audit.admin_name
        items.append(item)

    return {
        "items": items,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": (total + limit - 1) // limit,
    }


def get_deleted_review(reviews: ReviewRepository, audit_id: int) -> DeletedReviewDetail:
    """Audit copy plus the current state of the original row. Read only."""
    audit = reviews.get_deleted(audit_id)
    if audit is None:
        raise NotFoundError("Deleted review not found", f"audit record {audit_id} does not exist")
    return DeletedReviewDetail(
        **DeletedReviewRead.model_validate(audit).model_dump(),
        live_state=reviews.live_state(audit.review_id),
    )
