"""
SQLAlchemy Implementation of Review Repository.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import aliased

from restoreview.domain.models.deleted_review import DeletedReview
from restoreview.domain.models.review import Review, ReviewPhoto, ReviewVote
from restoreview.domain.models.user import User
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.infrastructure.repositories.base_repository import SQLAlchemyRepository

SUB_RATING_COLUMNS = (
    "food_rating",
    "service_rating",
    "atmosphere_rating",
    "price_rating",
    "cleanliness_rating",
    "delivery_speed_rating",
    "delivery_quality_rating",
)


def not_deleted():
    """Visibility filter; NULL counts as not deleted."""
    return or_(Review.deleted.is_(False), Review.deleted.is_(None))


class SQLAlchemyReviewRepository(SQLAlchemyRepository[Review], ReviewRepository):
    """Review repository implementation using SQLAlchemy."""

    def get_visible(self, review_id: int) -> Optional[Review]:
        return self.db.query(Review).filter(Review.id == review_id, not_deleted()).first()

    def list_visible(
        self,
        page: int,
        limit: int,
        user_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        restaurant_name: Optional[str] = None,
    ) -> Tuple[List[Review], int]:
        query = self.db.query(Review).filter(not_deleted())
        if user_id is not None:
            query = query.filter(Review.user_id == user_id)
        if restaurant_id is not None:
            query = query.filter(Review.restaurant_id == restaurant_id)
        if restaurant_name:
            query = query.filter(func.lower(Review.restaurant_name) == restaurant_name.strip().lower())

        total = query.count()
        reviews = (
            query.order_by(Review.created_at.desc(), Review.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return reviews, total

    def add_with_photos(self, review: Review, photo_urls: List[str]) -> Review:
        try:
            self.db.add(review)
            self.db.flush()
            for url in photo_urls:
                self.db.add(ReviewPhoto(review_id=review.id, photo_url=url))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(review)
        return review

    # --- Moderation -------------------------------------------------------

    def soft_delete(self, review: Review, audit: DeletedReview) -> bool:
        try:
            self.db.add(audit)
            self.db.flush()
            flagged = (
                self.db.query(Review)
                .filter(Review.id == review.id, not_deleted())
                .update({Review.deleted: True}, synchronize_session=False)
            )
            if not flagged:
                # Someone else deleted it since it was read; drop the audit copy
                self.db.rollback()
                return False
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return True

    def flag_deleted(self, review_id: int) -> bool:
        try:
            flagged = (
                self.db.query(Review)
                .filter(Review.id == review_id, not_deleted())
                .update({Review.deleted: True}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return bool(flagged)

    def list_deleted(
        self, page: int, limit: int, deleted_by: Optional[int] = None
    ) -> Tuple[List[Tuple[DeletedReview, Optional[str], Optional[str]]], int]:
        author = aliased(User)
        moderator = aliased(User)

        query = self.db.query(DeletedReview)
        if deleted_by is not None:
            query = query.filter(DeletedReview.deleted_by == deleted_by)
        total = query.count()

        rows = (
            query.outerjoin(author, author.id == DeletedReview.user_id)
            .outerjoin(moderator, moderator.id == DeletedReview.deleted_by)
            .add_columns(author.name, moderator.name)
            .order_by(DeletedReview.deleted_at.desc(), DeletedReview.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [tuple(row) for row in rows], total

    def get_deleted(self, audit_id: int) -> Optional[DeletedReview]:
        return self.db.get(DeletedReview, audit_id)

    def live_state(self, review_id: int) -> str:
        flag = self.db.query(Review.deleted).filter(Review.id == review_id).first()
        if flag is None:
            return "missing"
        return "deleted" if flag[0] else "active"

    # --- Votes ------------------------------------------------------------

    def record_vote(self, review_id: int, user_id: int, vote_type: str, delta: int) -> bool:
        try:
            self.db.add(ReviewVote(review_id=review_id, user_id=user_id, vote_type=vote_type))
            self.db.flush()
            self.db.query(Review).filter(Review.id == review_id).update(
                {Review.likes: Review.likes + delta}, synchronize_session=False
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return False
        return True

    def get_user_votes(self, review_ids: Iterable[int], user_id: int) -> Dict[int, str]:
        ids = list(review_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(ReviewVote.review_id, ReviewVote.vote_type)
            .filter(ReviewVote.user_id == user_id, ReviewVote.review_id.in_(ids))
            .all()
        )
        return {review_id: vote_type for review_id, vote_type in rows}

    # --- Analytics --------------------------------------------------------

    def _scoped(self, query, restaurant_id: Optional[int]):
        query = query.filter(not_deleted())
        if restaurant_id is not None:
            query = query.filter(Review.restaurant_id == restaurant_id)
        return query

    def get_stats(self, restaurant_id: Optional[int] = None) -> Dict[str, Any]:
        # Sub-ratings of 0 mean "not rated" and stay out of the averages
        sub_avgs = [
            func.avg(case((getattr(Review, col) > 0, getattr(Review, col)), else_=None))
            for col in SUB_RATING_COLUMNS
        ]
        row = self._scoped(
            self.db.query(
                func.count(Review.id),
                func.avg(Review.rating),
                func.sum(case((Review.response.isnot(None), 1), else_=0)),
                *sub_avgs,
            ),
            restaurant_id,
        ).one()

        total, avg_rating, responded = row[0] or 0, row[1], row[2] or 0
        return {
            "total_reviews": total,
            "average_rating": round(float(avg_rating or 0), 2),
            "responded_count": int(responded),
            "response_rate": round(int(responded) * 100.0 / total, 1) if total else 0.0,
            "criteria": {
                col.removesuffix("_rating"): round(float(value or 0), 2)
                for col, value in zip(SUB_RATING_COLUMNS, row[3:])
            },
        }

    def get_rating_distribution(self, restaurant_id: Optional[int] = None) -> Dict[int, int]:
        rows = self._scoped(
            self.db.query(Review.rating, func.count(Review.id)), restaurant_id
        ).group_by(Review.rating).all()
        counts = {rating: 0 for rating in range(1, 6)}
        for rating, count in rows:
            if rating in counts:
                counts[rating] = count
        return counts

    def get_created_since(self, since: datetime, restaurant_id: Optional[int] = None) -> List[datetime]:
        rows = self._scoped(
            self.db.query(Review.created_at).filter(Review.created_at >= since), restaurant_id
        ).all()
        return [created_at for (created_at,) in rows if created_at is not None]
