"""Restaurant service: slugs, CRUD and rating aggregates."""

import re
import secrets
from typing import List, Optional

import structlog

from restoreview.core.exceptions import ConflictError, NotFoundError, ValidationError
from restoreview.domain.models.restaurant import Restaurant
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.schemas.restaurant import RestaurantCreate, RestaurantRead, RestaurantUpdate

logger = structlog.get_logger(__name__)

CYRILLIC = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo",
    "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "",
    "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}
NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
MIN_SLUG_LENGTH = 3
SLUG_ATTEMPTS = 5


def _random_token() -> str:
    return secrets.token_hex(4)


def clean_slug(value: str) -> str:
    """Transliterate, lowercase and collapse everything else to single dashes."""
    text = "".join(CYRILLIC.get(ch, ch) for ch in value.strip().lower())
    return NON_SLUG_RE.sub("-", text).strip("-")


def generate_slug(name: Optional[str]) -> str:
    slug = clean_slug(name or "")
    if len(slug) < MIN_SLUG_LENGTH:
        return f"restaurant-{_random_token()}"
    return slug


def unique_slug(repo: RestaurantRepository, name: str, exclude_id: Optional[int] = None) -> str:
    base = generate_slug(name)
    if not repo.slug_exists(base, exclude_id):
        return base
    for _ in range(SLUG_ATTEMPTS):
        candidate = f"{base}-{_random_token()}"
        if not repo.slug_exists(candidate, exclude_id):
            return candidate
    return f"restaurant-{secrets.token_hex(8)}"


def to_read(restaurant: Restaurant, avg_rating: float = 0.0, review_count: int = 0) -> RestaurantRead:
    data = RestaurantRead.model_validate(restaurant)
    data.avg_rating = avg_rating
    data.review_count = review_count
    return data


def _with_ratings(repo: RestaurantRepository, restaurants: List[Restaurant]) -> List[RestaurantRead]:
    summary = repo.rating_summary(r.id for r in restaurants)
    return [to_read(r, *summary.get(r.id, (0.0, 0))) for r in restaurants]


def get_restaurant_or_404(repo: RestaurantRepository, restaurant_id: int) -> Restaurant:
    restaurant = repo.get_by_id(restaurant_id)
    if restaurant is None:
        raise NotFoundError("Restaurant not found", f"restaurant {restaurant_id} does not exist")
    return restaurant


def list_restaurants(
    repo: RestaurantRepository, category: Optional[str] = None, include_inactive: bool = False
) -> List[RestaurantRead]:
    return _with_ratings(repo, repo.list_restaurants(category, include_inactive))


def search_restaurants(repo: RestaurantRepository, query: str, limit: int = 20) -> List[RestaurantRead]:
    if not query or not query.strip():
        raise ValidationError("Search query required")
    return _with_ratings(repo, repo.search(query, min(max(limit, 1), 100)))


def get_restaurant(repo: RestaurantRepository, restaurant_id: int) -> RestaurantRead:
    return _with_ratings(repo, [get_restaurant_or_404(repo, restaurant_id)])[0]


def get_restaurant_by_slug(repo: RestaurantRepository, slug: str) -> RestaurantRead:
    restaurant = repo.get_by_slug(slug)
    if restaurant is None:
        raise NotFoundError("Restaurant not found", f"no restaurant with slug {slug!r}")
    return _with_ratings(repo, [restaurant])[0]


def create_restaurant(repo: RestaurantRepository, data: RestaurantCreate) -> RestaurantRead:
    restaurant = Restaurant(**data.model_dump(), slug=unique_slug(repo, data.name))
    restaurant = repo.create(restaurant)
    logger.info("Restaurant created", restaurant_id=restaurant.id, slug=restaurant.slug)
    return to_read(restaurant)


def update_restaurant(repo: RestaurantRepository, restaurant_id: int, data: RestaurantUpdate) -> RestaurantRead:
    restaurant = get_restaurant_or_404(repo, restaurant_id)
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationError("Name is required")
    restaurant = repo.update(restaurant, changes)
    logger.info("Restaurant updated", restaurant_id=restaurant.id, fields=sorted(changes))
    return get_restaurant(repo, restaurant.id)


def update_slug(repo: RestaurantRepository, restaurant_id: int, slug: str) -> RestaurantRead:
    restaurant = get_restaurant_or_404(repo, restaurant_id)
    cleaned = clean_slug(slug or "")
    if len(cleaned) < MIN_SLUG_LENGTH:
        raise ValidationError("Invalid slug", f"slug must have at least {MIN_SLUG_LENGTH} characters")
    if repo.slug_exists(cleaned, exclude_id=restaurant.id):
        raise ConflictError("Slug already in use", cleaned)
    restaurant.slug = cleaned
    repo.save(restaurant)
    logger.info("Restaurant slug updated", restaurant_id=restaurant.id, slug=cleaned)
    return get_restaurant(repo, restaurant.id)


def update_criteria(repo: RestaurantRepository, restaurant_id: int, criteria: dict) -> RestaurantRead:
    restaurant = get_restaurant_or_404(repo, restaurant_id)
    restaurant.criteria = criteria
    repo.save(restaurant)
    return get_restaurant(repo, restaurant.id)


def delete_restaurant(repo: RestaurantRepository, restaurant_id: int) -> None:
    get_restaurant_or_404(repo, restaurant_id)
    repo.delete(restaurant_id)
    logger.info("Restaurant deleted", restaurant_id=restaurant_id)
