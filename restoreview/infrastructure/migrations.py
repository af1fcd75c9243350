"""Runs alembic revisions up to head."""

import os

import structlog
from alembic import command
from alembic.config import Config

from restoreview.config import get_settings

logger = structlog.get_logger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def run_migrations() -> None:
    settings = get_settings()
    config = Config(os.path.join(PROJECT_ROOT, "alembic.ini"))
    config.set_main_option("script_location", os.path.join(PROJECT_ROOT, "db_migrations"))
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("%", "%%"))
    config.attributes["configure_logger"] = False
    logger.info("Applying database migrations")
    command.upgrade(config, "head")
    logger.info("Database schema is up to date")
