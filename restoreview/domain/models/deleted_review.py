"""Deleted review audit copy: one row per moderation delete, never mutated."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from restoreview.infrastructure.database import Base


class DeletedReview(Base):
    __tablename__ = "deleted_reviews"
    __table_args__ = (
        CheckConstraint("length(trim(deletion_reason)) > 0", name="ck_deleted_reviews_reason"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Snapshot of the live review at deletion time
    review_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    user_name = Column(String(100), nullable=True)
    restaurant_id = Column(Integer, nullable=True)
    restaurant_name = Column(String(100), nullable=False)
    review_type = Column(String(20), nullable=True)
    rating = Column(Integer, nullable=False)
    food_rating = Column(Integer, default=0)
    service_rating = Column(Integer, default=0)
    atmosphere_rating = Column(Integer, default=0)
    price_rating = Column(Integer, default=0)
    cleanliness_rating = Column(Integer, default=0)
    delivery_speed_rating = Column(Integer, default=0)
    delivery_quality_rating = Column(Integer, default=0)
    comment = Column(Text, nullable=False)
    original_created_at = Column(DateTime(timezone=True), nullable=True)

    # Moderation
    deleted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    deletion_reason = Column(Text, nullable=False)
    admin_name = Column(String(100), nullable=True)
    deleted_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<DeletedReview review={self.review_id} by={self.deleted_by}>"
