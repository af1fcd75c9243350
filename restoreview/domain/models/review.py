"""Review domain models: 'reviews', 'review_photos' and 'review_votes'."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from restoreview.infrastructure.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="SET NULL"), nullable=True, index=True
    )
    restaurant_name = Column(String(100), nullable=False)  # snapshot at creation time
    review_type = Column(String(20), nullable=False, default="dine_in")  # dine_in, delivery

    rating = Column(Integer, nullable=False)
    food_rating = Column(Integer, default=0)
    service_rating = Column(Integer, default=0)
    atmosphere_rating = Column(Integer, default=0)
    price_rating = Column(Integer, default=0)
    cleanliness_rating = Column(Integer, default=0)
    delivery_speed_rating = Column(Integer, default=0)
    delivery_quality_rating = Column(Integer, default=0)

    comment = Column(Text, nullable=False)
    likes = Column(Integer, nullable=False, default=0)

    # Manager reply
    response = Column(Text, nullable=True)
    response_date = Column(DateTime(timezone=True), nullable=True)
    responded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    manager_name = Column(String(100), nullable=True)

    # NULL counts as "not deleted" for rows that predate the column
    deleted = Column(Boolean, nullable=True, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    author = relationship("User", foreign_keys=[user_id], lazy="joined")
    photos = relationship(
        "ReviewPhoto",
        order_by="ReviewPhoto.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Review {self.id} - {self.restaurant_name} ({self.rating})>"


class ReviewPhoto(Base):
    __tablename__ = "review_photos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    photo_url = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ReviewVote(Base):
    __tablename__ = "review_votes"
    __table_args__ = (UniqueConstraint("review_id", "user_id", name="uq_review_vote"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    vote_type = Column(String(4), nullable=False)  # up, down
    created_at = Column(DateTime(timezone=True), server_default=func.now())
