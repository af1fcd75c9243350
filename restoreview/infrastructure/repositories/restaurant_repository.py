"""
SQLAlchemy Implementation of Restaurant Repository.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func

from restoreview.domain.models.restaurant import Restaurant
from restoreview.domain.models.review import Review
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.infrastructure.repositories.base_repository import SQLAlchemyRepository
from restoreview.infrastructure.repositories.review_repository import not_deleted


class SQLAlchemyRestaurantRepository(SQLAlchemyRepository[Restaurant], RestaurantRepository):
    """Restaurant repository implementation using SQLAlchemy."""

    def get_by_slug(self, slug: str) -> Optional[Restaurant]:
        return self.db.query(Restaurant).filter(Restaurant.slug == slug).first()

    def get_by_name(self, name: str) -> Optional[Restaurant]:
        return (
            self.db.query(Restaurant)
            .filter(func.lower(Restaurant.name) == name.strip().lower())
            .order_by(Restaurant.id)
            .first()
        )

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Restaurant.id).filter(Restaurant.slug == slug)
        if exclude_id is not None:
            query = query.filter(Restaurant.id != exclude_id)
        return query.first() is not None

    def list_restaurants(self, category: Optional[str] = None, include_inactive: bool = False) -> List[Restaurant]:
        query = self.db.query(Restaurant)
        if not include_inactive:
            query = query.filter(Restaurant.is_active.is_(True))
        if category:
            query = query.filter(Restaurant.category == category)
        return query.order_by(Restaurant.name.asc()).all()

    def search(self, query: str, limit: int = 20) -> List[Restaurant]:
        pattern = f"%{query.strip().lower()}%"
        return (
            self.db.query(Restaurant)
            .filter(Restaurant.is_active.is_(True), func.lower(Restaurant.name).like(pattern))
            .order_by(Restaurant.name.asc())
            .limit(limit)
            .all()
        )

    def rating_summary(self, restaurant_ids: Iterable[int]) -> Dict[int, Tuple[float, int]]:
        ids = list(restaurant_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(Review.restaurant_id, func.avg(Review.rating), func.count(Review.id))
            .filter(Review.restaurant_id.in_(ids), not_deleted())
            .group_by(Review.restaurant_id)
            .all()
        )
        return {rid: (round(float(avg or 0), 1), count) for rid, avg, count in rows}
