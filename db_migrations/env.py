from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from restoreview.config import get_settings
from restoreview.infrastructure.database import Base

# Register every table on Base.metadata for autogenerate
from restoreview.domain.models.restaurant import Restaurant  # noqa: F401
from restoreview.domain.models.user import User  # noqa: F401
from restoreview.domain.models.review import Review, ReviewPhoto, ReviewVote  # noqa: F401
from restoreview.domain.models.deleted_review import DeletedReview  # noqa: F401
from restoreview.domain.models.notification import Notification  # noqa: F401
from restoreview.domain.models.support import SupportMessage, SupportTicket  # noqa: F401

config = context.config
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL.replace("%", "%%"))

# Skip when invoked from the app, which already owns logging
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
