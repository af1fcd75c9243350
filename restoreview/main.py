"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from restoreview.config import get_settings
from restoreview.core.exceptions import register_exception_handlers
from restoreview.core.logging import configure_logging
from restoreview.core.middleware import setup_middleware
from restoreview.infrastructure.broadcast import broadcaster

# Import all models so SQLAlchemy knows about them
from restoreview.domain.models.restaurant import Restaurant  # noqa: F401
from restoreview.domain.models.user import User  # noqa: F401
from restoreview.domain.models.review import Review, ReviewPhoto, ReviewVote  # noqa: F401
from restoreview.domain.models.deleted_review import DeletedReview  # noqa: F401
from restoreview.domain.models.notification import Notification  # noqa: F401
from restoreview.domain.models.support import SupportMessage, SupportTicket  # noqa: F401

# Import routers
from restoreview.interfaces.api.auth import router as auth_router
from restoreview.interfaces.api.profile import router as profile_router
from restoreview.interfaces.api.admin import router as admin_router
from restoreview.interfaces.api.restaurants import router as restaurants_router
from restoreview.interfaces.api.reviews import router as reviews_router
from restoreview.interfaces.api.manager import router as manager_router
from restoreview.interfaces.api.notifications import router as notifications_router
from restoreview.interfaces.api.support import router as support_router
from restoreview.interfaces.websocket import router as websocket_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: schema migrations and head admin bootstrap."""
    logger.info("Starting Restoreview API", env=settings.ENVIRONMENT)

    if settings.RUN_MIGRATIONS_ON_STARTUP:
        from restoreview.infrastructure.migrations import run_migrations
        run_migrations()

    from restoreview.infrastructure.database import SessionLocal
    from restoreview.application.services.auth_service import ensure_head_admin
    db = SessionLocal()
    try:
        ensure_head_admin(db)
    finally:
        db.close()

    yield

    logger.info("Restoreview API stopped", subscribers=broadcaster.subscriber_count)


app = FastAPI(
    title="Restoreview",
    description="Restaurant reviews API: ratings, moderation, manager replies and support",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging, CORS)
setup_middleware(app)

# Uniform {message, details} errors
register_exception_handlers(app)

# Include routers
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(admin_router)
app.include_router(restaurants_router)
app.include_router(reviews_router)
app.include_router(manager_router)
app.include_router(notifications_router)
app.include_router(support_router)
app.include_router(websocket_router)

app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
def root():
    return {
        "name": "Restoreview API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
