"""
API Dependencies: repository factories.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from restoreview.domain.models.notification import Notification
from restoreview.domain.models.restaurant import Restaurant
from restoreview.domain.models.review import Review
from restoreview.domain.models.support import SupportTicket
from restoreview.domain.models.user import User
from restoreview.domain.repositories.notification_repository import NotificationRepository
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.repositories.review_repository import ReviewRepository
from restoreview.domain.repositories.support_repository import SupportRepository
from restoreview.domain.repositories.user_repository import UserRepository
from restoreview.infrastructure.database import get_db
from restoreview.infrastructure.repositories.notification_repository import SQLAlchemyNotificationRepository
from restoreview.infrastructure.repositories.restaurant_repository import SQLAlchemyRestaurantRepository
from restoreview.infrastructure.repositories.review_repository import SQLAlchemyReviewRepository
from restoreview.infrastructure.repositories.support_repository import SQLAlchemySupportRepository
from restoreview.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_restaurant_repository(db: Session = Depends(get_db)) -> RestaurantRepository:
    """Get restaurant repository instance."""
    return SQLAlchemyRestaurantRepository(db, Restaurant)


def get_review_repository(db: Session = Depends(get_db)) -> ReviewRepository:
    """Get review repository instance."""
    return SQLAlchemyReviewRepository(db, Review)


def get_notification_repository(db: Session = Depends(get_db)) -> NotificationRepository:
    """Get notification repository instance."""
    return SQLAlchemyNotificationRepository(db, Notification)


def get_support_repository(db: Session = Depends(get_db)) -> SupportRepository:
    """Get support repository instance."""
    return SQLAlchemySupportRepository(db, SupportTicket)
