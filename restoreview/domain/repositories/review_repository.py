"""
Review Repository Interface.
Covers live reviews, the deleted-review audit table and votes.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from restoreview.domain.models.deleted_review import DeletedReview
from restoreview.domain.models.review import Review
from restoreview.domain.repositories.base import BaseRepository


class ReviewRepository(BaseRepository[Review]):
    """Interface for Review-specific operations."""

    def get_visible(self, review_id: int) -> Optional[Review]:
        """Get a review unless it has been soft-deleted."""
        ...

    def list_visible(
        self,
        page: int,
        limit: int,
        user_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        restaurant_name: Optional[str] = None,
    ) -> Tuple[List[Review], int]:
        ...

    def add_with_photos(self, review: Review, photo_urls: List[str]) -> Review:
        """Insert a review and its photo rows as one unit."""
        ...

    def soft_delete(self, review: Review, audit: DeletedReview) -> bool:
        """Write the audit copy and flag the live row in a single transaction.

        Returns False, with nothing written, if the row was already flagged.
        """
        ...

    def flag_deleted(self, review_id: int) -> bool:
        """Flag the live row deleted in its own transaction; False if it already was."""
        ...

    def list_deleted(
        self, page: int, limit: int, deleted_by: Optional[int] = None
    ) -> Tuple[List[Tuple[DeletedReview, Optional[str], Optional[str]]], int]:
        """Audit rows newest first with current author and moderator names."""
        ...

    def get_deleted(self, audit_id: int) -> Optional[DeletedReview]:
        ...

    def live_state(self, review_id: int) -> str:
        """'deleted', 'active' or 'missing' for the original row."""
        ...

    def record_vote(self, review_id: int, user_id: int, vote_type: str, delta: int) -> bool:
        """Insert a vote and apply its counter delta; False if already voted."""
        ...

    def get_user_votes(self, review_ids: Iterable[int], user_id: int) -> Dict[int, str]:
        ...

    def get_stats(self, restaurant_id: Optional[int] = None) -> Dict[str, Any]:
        ...

    def get_rating_distribution(self, restaurant_id: Optional[int] = None) -> Dict[int, int]:
        ...

    def get_created_since(self, since: datetime, restaurant_id: Optional[int] = None) -> List[datetime]:
        ...
