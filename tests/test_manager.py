"""
Tests for the manager workspace: scoped listings, replies and analytics.
"""

from restoreview.domain.models.notification import Notification
from tests.conftest import bearer, make_user


class TestManagerReviews:
    def test_sees_only_own_restaurant(self, client, manager_headers, make_review, user, restaurant, other_restaurant):
        mine = make_review(user, restaurant)
        make_review(user, other_restaurant)

        # A manager cannot widen the scope by asking for another restaurant
        data = client.get(
            "/api/manager/reviews", params={"restaurant_id": other_restaurant.id}, headers=manager_headers
        ).json()
        assert [r["id"] for r in data["items"]] == [mine.id]

    def test_admin_sees_everything(self, client, admin_headers, make_review, user, restaurant, other_restaurant):
        make_review(user, restaurant)
        make_review(user, other_restaurant)
        assert client.get("/api/manager/reviews", headers=admin_headers).json()["total"] == 2

    def test_unassigned_manager_is_forbidden(self, client, db_session):
        drifter = make_user(db_session, "Drifter", "drifter@example.com", role="manager")
        response = client.get("/api/manager/reviews", headers=bearer(client, drifter))
        assert response.status_code == 403

    def test_plain_user_is_forbidden(self, client, user_headers):
        assert client.get("/api/manager/reviews", headers=user_headers).status_code == 403


class TestRespond:
    def test_reply_is_saved_and_author_notified(self, client, db_session, manager_headers, review, user):
        response = client.post(
            f"/api/manager/reviews/{review.id}/response",
            json={"response": "  Thank you, come again!  "},
            headers=manager_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Thank you, come again!"
        assert data["manager_name"] == "Manager Mia"
        assert data["response_date"] is not None

        notes = db_session.query(Notification).filter_by(user_id=user.id, type="response").all()
        assert len(notes) == 1

    def test_other_restaurant_is_forbidden(self, client, manager_headers, make_review, user, other_restaurant):
        foreign = make_review(user, other_restaurant)
        response = client.post(
            f"/api/manager/reviews/{foreign.id}/response", json={"response": "Hi"}, headers=manager_headers
        )
        assert response.status_code == 403

    def test_blank_reply_is_400(self, client, manager_headers, review):
        response = client.post(
            f"/api/manager/reviews/{review.id}/response", json={"response": "   "}, headers=manager_headers
        )
        assert response.status_code == 400

    def test_deleted_review_is_404(self, client, db_session, manager_headers, review):
        review.deleted = True
        db_session.commit()
        response = client.post(
            f"/api/manager/reviews/{review.id}/response", json={"response": "Hi"}, headers=manager_headers
        )
        assert response.status_code == 404


class TestAnalytics:
    def test_stats(self, client, db_session, manager_headers, make_review, user, restaurant, other_restaurant):
        make_review(user, restaurant, rating=5, food_rating=4, service_rating=0)
        answered = make_review(user, restaurant, rating=3, food_rating=2, service_rating=5)
        answered.response = "Thanks"
        make_review(user, other_restaurant, rating=1)
        db_session.commit()

        stats = client.get("/api/manager/analytics/stats", headers=manager_headers).json()
        assert stats["restaurant_id"] == restaurant.id
        assert stats["total_reviews"] == 2
        assert stats["average_rating"] == 4.0
        assert stats["responded_count"] == 1
        assert stats["response_rate"] == 50.0
        assert stats["criteria"]["food"] == 3.0
        # Unrated service scores are left out of the average
        assert stats["criteria"]["service"] == 5.0

    def test_charts(self, client, manager_headers, make_review, user, restaurant):
        for rating in (5, 5, 2):
            make_review(user, restaurant, rating=rating)

        charts = client.get("/api/manager/analytics/charts", params={"days": 7}, headers=manager_headers).json()
        assert len(charts["reviews_per_day"]) == 7
        assert sum(day["count"] for day in charts["reviews_per_day"]) == 3
        assert charts["rating_distribution"] == [
            {"rating": 1, "count": 0},
            {"rating": 2, "count": 1},
            {"rating": 3, "count": 0},
            {"rating": 4, "count": 0},
            {"rating": 5, "count": 2},
        ]


class TestManagerRestaurants:
    def test_manager_gets_own_restaurant_with_live_figures(
        self, client, db_session, manager_headers, make_review, user, restaurant, other_restaurant
    ):
        make_review(user, restaurant, rating=5)
        make_review(user, restaurant, rating=2)
        hidden = make_review(user, restaurant, rating=1)
        hidden.deleted = True
        db_session.commit()
        make_review(user, other_restaurant, rating=3)

        response = client.get("/api/manager/restaurants", headers=manager_headers)
        assert response.status_code == 200
        data = response.json()
        assert [r["id"] for r in data] == [restaurant.id]
        assert data[0]["review_count"] == 2
        assert data[0]["avg_rating"] == 3.5

    def test_admin_gets_every_restaurant(self, client, db_session, admin_headers, restaurant, other_restaurant):
        other_restaurant.is_active = False
        db_session.commit()
        data = client.get("/api/manager/restaurants", headers=admin_headers).json()
        assert {r["name"] for r in data} == {"Pushkin", "Noodle Bar"}

    def test_unassigned_manager_is_forbidden(self, client, db_session):
        drifter = make_user(db_session, "Drifter", "drifter@example.com", role="manager")
        assert client.get("/api/manager/restaurants", headers=bearer(client, drifter)).status_code == 403

    def test_plain_user_is_forbidden(self, client, user_headers):
        assert client.get("/api/manager/restaurants", headers=user_headers).status_code == 403
