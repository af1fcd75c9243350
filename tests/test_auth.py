"""
Tests for registration, login, token checks and the profile endpoints.
"""

import os

import pytest

from restoreview.application.services.auth_service import (
    create_access_token,
    decode_access_token,
    ensure_head_admin,
    get_user_by_email,
)
from restoreview.config import get_settings
from tests.conftest import login, make_user

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def register(client, **overrides):
    body = {"name": "Eve Example", "email": "Eve@Example.com", "password": "secret123"}
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


class TestRegister:
    def test_register_returns_token_and_user(self, client):
        response = register(client)
        assert response.status_code == 201
        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "eve@example.com"
        assert data["user"]["role"] == "user"

    def test_duplicate_email_is_409(self, client):
        register(client)
        assert register(client, email="eve@example.com").status_code == 409

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "E"},
            {"name": "x" * 51},
            {"email": "not-an-email"},
            {"password": "short1"},
            {"password": "lettersonly"},
            {"password": "12345678"},
        ],
    )
    def test_invalid_input_is_400(self, client, overrides):
        response = register(client, **overrides)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"


class TestLogin:
    def test_login_is_case_insensitive_on_email(self, client, user):
        response = login(client, "ALICE@example.com")
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    def test_token_carries_email_and_role(self, client, manager):
        token = login(client, manager.email).json()["access_token"]
        payload = decode_access_token(token)
        assert payload["sub"] == manager.email
        assert payload["role"] == "manager"

    def test_wrong_password_is_401(self, client, user):
        response = login(client, user.email, "nope-nope-1")
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_unknown_email_is_401(self, client):
        assert login(client, "ghost@example.com").status_code == 401


class TestTokens:
    def test_validate_token(self, client, user):
        token = login(client, user.email).json()["access_token"]
        assert client.post("/api/auth/validate-token", json={"token": token}).json() == {"valid": True}
        assert client.post("/api/auth/validate-token", json={"token": "garbage"}).json() == {"valid": False}

    def test_validate_token_for_blocked_user(self, client, db_session):
        blocked = make_user(db_session, "Mallory", "mallory@example.com", is_blocked=True, blocked_reason="spam")
        token = create_access_token({"sub": blocked.email, "role": blocked.role})
        assert client.post("/api/auth/validate-token", json={"token": token}).json() == {"valid": False}

    def test_me(self, client, user, user_headers):
        data = client.get("/api/auth/me", headers=user_headers).json()
        assert data["id"] == user.id
        assert data["name"] == "Alice"

    def test_bad_token_is_401(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_token_for_deleted_account_is_401(self, client, db_session):
        token = create_access_token({"sub": "gone@example.com", "role": "user"})
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestProfile:
    def test_update_profile(self, client, user_headers):
        response = client.put("/api/profile", json={"name": "  Alice B  ", "phone": "+7 900"}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Alice B"
        assert response.json()["phone"] == "+7 900"

    def test_short_name_is_400(self, client, user_headers):
        assert client.put("/api/profile", json={"name": "A"}, headers=user_headers).status_code == 400

    def test_avatar_upload_and_removal(self, client, user_headers, storage):
        response = client.post(
            "/api/profile/avatar", files={"avatar": ("me.png", PNG, "image/png")}, headers=user_headers
        )
        assert response.status_code == 200
        url = response.json()["avatar"]
        assert url.startswith("/uploads/avatars/")
        path = os.path.join(storage.root, "avatars", url.rsplit("/", 1)[-1])
        assert os.path.exists(path)

        response = client.delete("/api/profile/avatar", headers=user_headers)
        assert response.json()["avatar"] is None
        assert not os.path.exists(path)

    def test_avatar_must_be_image(self, client, user_headers):
        response = client.post(
            "/api/profile/avatar", files={"avatar": ("me.pdf", b"%PDF", "application/pdf")}, headers=user_headers
        )
        assert response.status_code == 400


class TestHeadAdminBootstrap:
    def test_creates_account(self, db_session):
        user = ensure_head_admin(db_session)
        assert user.role == "head_admin"
        assert user.email == get_settings().HEAD_ADMIN_EMAIL

    def test_restores_demoted_account(self, db_session):
        make_user(db_session, "Head", get_settings().HEAD_ADMIN_EMAIL, role="user", is_blocked=True)
        ensure_head_admin(db_session)
        user = get_user_by_email(db_session, get_settings().HEAD_ADMIN_EMAIL)
        assert user.role == "head_admin"
        assert user.is_blocked is False

    def test_is_idempotent(self, db_session, client):
        ensure_head_admin(db_session)
        ensure_head_admin(db_session)
        assert login(client, get_settings().HEAD_ADMIN_EMAIL, get_settings().HEAD_ADMIN_PASSWORD).status_code == 200
