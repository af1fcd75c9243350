"""Restaurant API routes: public catalogue and admin management."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from restoreview.application.services import restaurant_service
from restoreview.application.services.role_policy import has_role
from restoreview.domain.models.user import User
from restoreview.domain.repositories.restaurant_repository import RestaurantRepository
from restoreview.domain.schemas.restaurant import (
    CriteriaUpdate,
    RestaurantCreate,
    RestaurantRead,
    RestaurantUpdate,
    SlugUpdate,
)
from restoreview.interfaces.api.deps import get_optional_user, require_admin
from restoreview.interfaces.deps import get_restaurant_repository

router = APIRouter(prefix="/api/restaurants", tags=["Restaurants"])


@router.get("", response_model=List[RestaurantRead])
def list_restaurants(
    category: Optional[str] = None,
    include_inactive: bool = False,
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    user: Optional[User] = Depends(get_optional_user),
):
    """Active restaurants; admins may include inactive ones."""
    show_inactive = include_inactive and user is not None and has_role(user, "admin")
    return restaurant_service.list_restaurants(repo, category, show_inactive)


@router.get("/search", response_model=List[RestaurantRead])
def search_restaurants(
    q: str = "",
    limit: int = 20,
    repo: RestaurantRepository = Depends(get_restaurant_repository),
):
    return restaurant_service.search_restaurants(repo, q, limit)


@router.get("/slug/{slug}", response_model=RestaurantRead)
def get_by_slug(slug: str, repo: RestaurantRepository = Depends(get_restaurant_repository)):
    return restaurant_service.get_restaurant_by_slug(repo, slug)


@router.get("/{restaurant_id}", response_model=RestaurantRead)
def get_restaurant(restaurant_id: int, repo: RestaurantRepository = Depends(get_restaurant_repository)):
    return restaurant_service.get_restaurant(repo, restaurant_id)


@router.post("", response_model=RestaurantRead, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    body: RestaurantCreate,
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    admin: User = Depends(require_admin),
):
    return restaurant_service.create_restaurant(repo, body)


@router.put("/{restaurant_id}", response_model=RestaurantRead)
def update_restaurant(
    restaurant_id: int,
    body: RestaurantUpdate,
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    admin: User = Depends(require_admin),
):
    return restaurant_service.update_restaurant(repo, restaurant_id, body)


@router.put("/{restaurant_id}/slug", response_model=RestaurantRead)
def update_slug(
    restaurant_id: int,
    body: SlugUpdate,
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    admin: User = Depends(require_admin),
):
    return restaurant_service.update_slug(repo, restaurant_id, body.slug)


@router.put("/{restaurant_id}/criteria", response_model=RestaurantRead)
def update_criteria(
    restaurant_id: int,
    body: CriteriaUpdate,
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    admin: User = Depends(require_admin),
):
    return restaurant_service.update_criteria(repo, restaurant_id, body.criteria)


@router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_restaurant(
    restaurant_id: int,
    repo: RestaurantRepository = Depends(get_restaurant_repository),
    admin: User = Depends(require_admin),
):
    restaurant_service.delete_restaurant(repo, restaurant_id)
