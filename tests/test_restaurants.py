"""
Tests for restaurant slugs, catalogue endpoints and admin management.
"""

import pytest

from restoreview.application.services import restaurant_service
from restoreview.application.services.restaurant_service import clean_slug, generate_slug, unique_slug
from restoreview.core.exceptions import ValidationError
from restoreview.domain.schemas.restaurant import RestaurantUpdate
from restoreview.domain.models.restaurant import Restaurant
from restoreview.infrastructure.repositories.restaurant_repository import SQLAlchemyRestaurantRepository


@pytest.fixture
def restaurant_repo(db_session):
    return SQLAlchemyRestaurantRepository(db_session, Restaurant)


class TestSlugs:
    def test_cyrillic_is_transliterated(self):
        assert generate_slug("Пушкин") == "pushkin"
        assert generate_slug("Чайхона №1") == "chayhona-1"

    def test_punctuation_collapses_to_single_dashes(self):
        assert clean_slug("  Joe's -- Diner & Grill! ") == "joe-s-diner-grill"

    @pytest.mark.parametrize("name", ["", "  ", "Ы", "!!"])
    def test_short_names_fall_back_to_random(self, name):
        slug = generate_slug(name)
        assert slug.startswith("restaurant-")
        assert len(slug) > len("restaurant-")

    def test_collision_gets_suffix(self, restaurant_repo, restaurant):
        slug = unique_slug(restaurant_repo, "Pushkin")
        assert slug.startswith("pushkin-")
        assert slug != "pushkin"

    def test_own_slug_is_not_a_collision(self, restaurant_repo, restaurant):
        assert unique_slug(restaurant_repo, "Pushkin", exclude_id=restaurant.id) == "pushkin"

    def test_exhausted_attempts_use_long_token(self, restaurant_repo, monkeypatch):
        monkeypatch.setattr(restaurant_repo, "slug_exists", lambda slug, exclude_id=None: True)
        slug = unique_slug(restaurant_repo, "Pushkin")
        assert slug.startswith("restaurant-")
        assert len(slug) == len("restaurant-") + 16

    def test_update_slug_conflict_is_409(self, client, admin_headers, restaurant, other_restaurant):
        response = client.put(
            f"/api/restaurants/{other_restaurant.id}/slug", json={"slug": "Pushkin"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_update_slug_is_cleaned(self, client, admin_headers, restaurant):
        response = client.put(
            f"/api/restaurants/{restaurant.id}/slug", json={"slug": "Пушкин Кафе"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["slug"] == "pushkin-kafe"


class TestCatalogue:
    def test_avg_rating_ignores_deleted_reviews(self, client, db_session, make_review, user, restaurant):
        make_review(user, restaurant, rating=5)
        make_review(user, restaurant, rating=3)
        hidden = make_review(user, restaurant, rating=1)
        hidden.deleted = True
        db_session.commit()

        data = client.get(f"/api/restaurants/{restaurant.id}").json()
        assert data["avg_rating"] == 4.0
        assert data["review_count"] == 2

    def test_lookup_by_slug(self, client, restaurant):
        response = client.get("/api/restaurants/slug/pushkin")
        assert response.status_code == 200
        assert response.json()["id"] == restaurant.id
        assert client.get("/api/restaurants/slug/missing").status_code == 404

    def test_search(self, client, restaurant, other_restaurant):
        names = [r["name"] for r in client.get("/api/restaurants/search", params={"q": "noodle"}).json()]
        assert names == ["Noodle Bar"]
        assert client.get("/api/restaurants/search", params={"q": " "}).status_code == 400

    def test_inactive_hidden_from_public(self, client, db_session, admin_headers, restaurant, other_restaurant):
        other_restaurant.is_active = False
        db_session.commit()

        public = [r["id"] for r in client.get("/api/restaurants", params={"include_inactive": True}).json()]
        assert public == [restaurant.id]
        full = client.get("/api/restaurants", params={"include_inactive": True}, headers=admin_headers).json()
        assert {r["id"] for r in full} == {restaurant.id, other_restaurant.id}


class TestAdminManagement:
    def test_create_generates_slug(self, client, admin_headers):
        response = client.post(
            "/api/restaurants", json={"name": "Сыроварня", "delivery_time": "30 - 45"}, headers=admin_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "syrovarnya"
        assert data["delivery_time"] == "30-45"

    @pytest.mark.parametrize("delivery_time", ["45-30", "30", "fast", "30-30"])
    def test_bad_delivery_time_is_400(self, client, admin_headers, delivery_time):
        response = client.post(
            "/api/restaurants", json={"name": "Cafe", "delivery_time": delivery_time}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_requires_admin(self, client, manager_headers):
        assert client.post("/api/restaurants", json={"name": "Cafe"}, headers=manager_headers).status_code == 403

    def test_update_and_criteria(self, client, admin_headers, restaurant):
        response = client.put(
            f"/api/restaurants/{restaurant.id}", json={"description": "Classic cuisine"}, headers=admin_headers
        )
        assert response.json()["description"] == "Classic cuisine"

        criteria = {"food": True, "delivery": False}
        response = client.put(
            f"/api/restaurants/{restaurant.id}/criteria", json={"criteria": criteria}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["criteria"] == criteria

    def test_delete(self, client, admin_headers, other_restaurant):
        assert client.delete(f"/api/restaurants/{other_restaurant.id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/restaurants/{other_restaurant.id}").status_code == 404

    def test_service_rejects_blank_name_on_update(self, restaurant_repo, restaurant):
        with pytest.raises(ValidationError):
            restaurant_service.update_restaurant(restaurant_repo, restaurant.id, RestaurantUpdate(name="   "))
