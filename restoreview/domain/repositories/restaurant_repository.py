"""
Restaurant Repository Interface.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from restoreview.domain.models.restaurant import Restaurant
from restoreview.domain.repositories.base import BaseRepository


class RestaurantRepository(BaseRepository[Restaurant]):
    """Interface for Restaurant-specific operations."""

    def get_by_slug(self, slug: str) -> Optional[Restaurant]:
        ...

    def get_by_name(self, name: str) -> Optional[Restaurant]:
        """Case-insensitive exact name lookup."""
        ...

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        ...

    def list_restaurants(self, category: Optional[str] = None, include_inactive: bool = False) -> List[Restaurant]:
        ...

    def search(self, query: str, limit: int = 20) -> List[Restaurant]:
        ...

    def rating_summary(self, restaurant_ids: Iterable[int]) -> Dict[int, Tuple[float, int]]:
        """Average rating and review count per restaurant, deleted reviews excluded."""
        ...
