"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are cached on first import; point them at SQLite before the app loads.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from restoreview.main import app
from restoreview.config import get_settings
from restoreview.infrastructure.database import Base, get_db
from restoreview.infrastructure.photo_storage import PhotoStorage, get_photo_storage
from restoreview.application.services.auth_service import hash_password
from restoreview.domain.models.restaurant import Restaurant
from restoreview.domain.models.review import Review
from restoreview.domain.models.user import User

PASSWORD = "password123"

# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(tmp_path):
    return PhotoStorage(str(tmp_path / "uploads"), get_settings().MAX_UPLOAD_BYTES)


@pytest.fixture(scope="function")
def client(db_session, storage):
    """
    Create a test client with database session override.

    The client is not entered as a context manager, so the lifespan
    (migrations, head admin bootstrap) does not run against the test engine.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_storage] = lambda: storage

    yield TestClient(app)

    app.dependency_overrides.clear()


def make_user(db, name, email, role="user", restaurant_id=None, is_blocked=False, blocked_reason=None):
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
        restaurant_id=restaurant_id,
        is_blocked=is_blocked,
        blocked_reason=blocked_reason,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client, email, password=PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def bearer(client, user):
    response = login(client, user.email)
    assert response.status_code == 200, f"Login failed: {response.json()}"
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def restaurant(db_session):
    restaurant = Restaurant(name="Pushkin", slug="pushkin", category="russian", is_active=True)
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def other_restaurant(db_session):
    restaurant = Restaurant(name="Noodle Bar", slug="noodle-bar", category="asian", is_active=True)
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def head_admin(db_session):
    return make_user(db_session, "Head Admin", get_settings().HEAD_ADMIN_EMAIL, role="head_admin")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "Admin Bob", "admin@example.com", role="admin")


@pytest.fixture
def manager(db_session, restaurant):
    return make_user(db_session, "Manager Mia", "manager@example.com", role="manager", restaurant_id=restaurant.id)


@pytest.fixture
def user(db_session):
    return make_user(db_session, "Alice", "alice@example.com")


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, "Carol", "carol@example.com")


@pytest.fixture
def head_admin_headers(client, head_admin):
    return bearer(client, head_admin)


@pytest.fixture
def admin_headers(client, admin):
    return bearer(client, admin)


@pytest.fixture
def manager_headers(client, manager):
    return bearer(client, manager)


@pytest.fixture
def user_headers(client, user):
    return bearer(client, user)


@pytest.fixture
def other_headers(client, other_user):
    return bearer(client, other_user)


@pytest.fixture
def make_review(db_session):
    """Factory for reviews written directly to the database."""
    def _make(author, restaurant, rating=4, comment="Tasty borscht", **extra):
        review = Review(
            user_id=author.id,
            restaurant_id=restaurant.id,
            restaurant_name=restaurant.name,
            rating=rating,
            comment=comment,
            likes=0,
            deleted=False,
            **extra,
        )
        db_session.add(review)
        db_session.commit()
        db_session.refresh(review)
        return review

    return _make


@pytest.fixture
def review(make_review, user, restaurant):
    return make_review(user, restaurant)
