"""
Tests for review creation, listing, photo uploads and edits.
"""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from restoreview.main import app
from restoreview.domain.models.deleted_review import DeletedReview
from restoreview.domain.models.notification import Notification
from restoreview.domain.models.review import Review, ReviewPhoto
from restoreview.infrastructure.repositories.review_repository import SQLAlchemyReviewRepository

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def payload(**overrides):
    data = {
        "restaurant_id": None,
        "rating": 5,
        "food_rating": 5,
        "service_rating": 4,
        "review_type": "dine_in",
        "comment": "Great pelmeni and friendly staff",
    }
    data.update(overrides)
    return data


class TestCreateReview:
    def test_create_by_id(self, client, db_session, user, user_headers, restaurant):
        response = client.post("/api/reviews", json=payload(restaurant_id=restaurant.id), headers=user_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["restaurant_name"] == "Pushkin"
        assert data["author_name"] == "Alice"
        assert data["likes"] == 0
        assert data["service_rating"] == 4

        notes = db_session.query(Notification).filter_by(user_id=user.id).all()
        assert len(notes) == 1
        assert "Pushkin" in notes[0].message

    def test_create_by_name_is_case_insensitive(self, client, user_headers, restaurant):
        response = client.post("/api/reviews", json=payload(restaurant_name="pushKIN"), headers=user_headers)
        assert response.status_code == 201
        assert response.json()["restaurant_id"] == restaurant.id

    def test_unknown_restaurant_is_404(self, client, user_headers, restaurant):
        response = client.post("/api/reviews", json=payload(restaurant_name="Nowhere"), headers=user_headers)
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rating": 0},
            {"rating": 6},
            {"food_rating": 7},
            {"comment": "   "},
            {"comment": "x" * 1001},
            {"review_type": "takeaway"},
        ],
    )
    def test_invalid_payload_is_400(self, client, user_headers, restaurant, overrides):
        response = client.post(
            "/api/reviews", json=payload(restaurant_id=restaurant.id, **overrides), headers=user_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"

    def test_missing_restaurant_reference_is_400(self, client, user_headers):
        assert client.post("/api/reviews", json=payload(), headers=user_headers).status_code == 400

    def test_requires_login(self, client, restaurant):
        assert client.post("/api/reviews", json=payload(restaurant_id=restaurant.id)).status_code == 401


class TestPhotos:
    def form(self, restaurant):
        return {"restaurant_id": str(restaurant.id), "rating": "4", "comment": "Nice terrace"}

    def test_photos_are_stored(self, client, db_session, user_headers, restaurant, storage):
        files = [("photos", ("a.png", PNG, "image/png")), ("photos", ("b.png", PNG, "image/png"))]
        response = client.post(
            "/api/reviews/with-photos", data=self.form(restaurant), files=files, headers=user_headers
        )
        assert response.status_code == 201
        urls = response.json()["photos"]
        assert len(urls) == 2
        assert all(url.startswith("/uploads/reviews/") for url in urls)
        for url in urls:
            assert os.path.exists(os.path.join(storage.root, "reviews", url.rsplit("/", 1)[-1]))

    def test_too_many_photos(self, client, db_session, user_headers, restaurant):
        files = [("photos", (f"{i}.png", PNG, "image/png")) for i in range(6)]
        response = client.post(
            "/api/reviews/with-photos", data=self.form(restaurant), files=files, headers=user_headers
        )
        assert response.status_code == 400
        assert db_session.query(Review).count() == 0

    def test_rejects_non_images(self, client, db_session, user_headers, restaurant):
        files = [("photos", ("notes.txt", b"hello", "text/plain"))]
        response = client.post(
            "/api/reviews/with-photos", data=self.form(restaurant), files=files, headers=user_headers
        )
        assert response.status_code == 400
        assert db_session.query(Review).count() == 0

    def test_invalid_form_is_400(self, client, user_headers, restaurant):
        form = self.form(restaurant)
        form["rating"] = "9"
        response = client.post("/api/reviews/with-photos", data=form, headers=user_headers)
        assert response.status_code == 400

    def test_failed_insert_removes_stored_files(self, db_session, user_headers, restaurant, storage, monkeypatch):
        def broken_insert(self, review, photo_urls):
            self.db.rollback()
            raise OperationalError("INSERT INTO review_photos", {}, Exception("disk full"))

        monkeypatch.setattr(SQLAlchemyReviewRepository, "add_with_photos", broken_insert)
        client = TestClient(app, raise_server_exceptions=False)
        files = [("photos", ("a.png", PNG, "image/png"))]
        response = client.post(
            "/api/reviews/with-photos", data=self.form(restaurant), files=files, headers=user_headers
        )

        assert response.status_code == 500
        assert db_session.query(Review).count() == 0
        assert db_session.query(ReviewPhoto).count() == 0
        stored = os.path.join(storage.root, "reviews")
        assert not os.path.isdir(stored) or os.listdir(stored) == []


class TestListAndEdit:
    def test_newest_first_with_filters(self, client, make_review, user, other_user, restaurant, other_restaurant):
        first = make_review(user, restaurant)
        second = make_review(other_user, other_restaurant)
        third = make_review(user, other_restaurant)

        ids = [r["id"] for r in client.get("/api/reviews").json()["items"]]
        assert ids == [third.id, second.id, first.id]

        by_user = client.get("/api/reviews", params={"user_id": user.id}).json()
        assert by_user["total"] == 2
        by_restaurant = client.get("/api/reviews", params={"restaurant_id": other_restaurant.id}).json()
        assert {r["id"] for r in by_restaurant["items"]} == {second.id, third.id}
        by_name = client.get("/api/reviews", params={"restaurant_name": "Pushkin"}).json()
        assert [r["id"] for r in by_name["items"]] == [first.id]

    def test_pagination(self, client, make_review, user, restaurant):
        for i in range(5):
            make_review(user, restaurant, comment=f"c{i}")
        page = client.get("/api/reviews", params={"page": 2, "limit": 2}).json()
        assert page["total"] == 5
        assert page["total_pages"] == 3
        assert len(page["items"]) == 2

    def test_author_can_edit(self, client, user_headers, review):
        response = client.put(f"/api/reviews/{review.id}", json={"rating": 2, "comment": "Went downhill"}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["rating"] == 2

    def test_admin_can_edit(self, client, admin_headers, review):
        assert client.put(f"/api/reviews/{review.id}", json={"rating": 3}, headers=admin_headers).status_code == 200

    def test_stranger_cannot_edit(self, client, other_headers, review):
        assert client.put(f"/api/reviews/{review.id}", json={"rating": 1}, headers=other_headers).status_code == 403

    def test_empty_edit_is_400(self, client, user_headers, review):
        assert client.put(f"/api/reviews/{review.id}", json={}, headers=user_headers).status_code == 400


class TestRemoval:
    def test_author_can_delete_own_review(self, client, db_session, user_headers, review):
        review_id = review.id
        response = client.delete(f"/api/reviews/{review_id}", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["deleted"] is True
        assert response.json()["audit_recorded"] is True
        assert client.get(f"/api/reviews/{review_id}").status_code == 404

        audit = db_session.query(DeletedReview).one()
        assert audit.review_id == review_id
        assert audit.deletion_reason == "Deleted by author"
        db_session.expire_all()
        assert db_session.get(Review, review_id).deleted is True

    def test_staff_can_delete_any_review(self, client, db_session, manager_headers, review):
        assert client.delete(f"/api/reviews/{review.id}", headers=manager_headers).status_code == 200
        assert db_session.query(DeletedReview).one().deletion_reason == "Deleted by staff"

    def test_stranger_cannot_delete(self, client, db_session, other_headers, review):
        response = client.delete(f"/api/reviews/{review.id}", headers=other_headers)
        assert response.status_code == 403
        assert client.get(f"/api/reviews/{review.id}").status_code == 200
        assert db_session.query(DeletedReview).count() == 0

    def test_deleting_twice_is_404(self, client, user_headers, review):
        assert client.delete(f"/api/reviews/{review.id}", headers=user_headers).status_code == 200
        assert client.delete(f"/api/reviews/{review.id}", headers=user_headers).status_code == 404

    def test_requires_login(self, client, review):
        assert client.delete(f"/api/reviews/{review.id}").status_code == 401
