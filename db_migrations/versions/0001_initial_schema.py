"""initial schema: users, restaurants, reviews, moderation audit, votes, notifications, support

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _false():
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        return sa.text("false")
    return sa.text("0")


def _true():
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        return sa.text("true")
    return sa.text("1")


def _now():
    return sa.text("CURRENT_TIMESTAMP")


def upgrade():
    op.create_table(
        "restaurants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=150), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=30), nullable=True),
        sa.Column("hours", sa.String(length=100), nullable=True),
        sa.Column("price_range", sa.String(length=10), nullable=True),
        sa.Column("min_price", sa.Integer(), nullable=True),
        sa.Column("delivery_time", sa.String(length=20), nullable=True),
        sa.Column("criteria", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=_true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_restaurants_name", "restaurants", ["name"])
    op.create_index("ix_restaurants_slug", "restaurants", ["slug"], unique=True)
    op.create_index("ix_restaurants_category", "restaurants", ["category"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column(
            "restaurant_id",
            sa.Integer(),
            sa.ForeignKey("restaurants.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_blocked", sa.Boolean(), nullable=False, server_default=_false()),
        sa.Column("blocked_reason", sa.Text(), nullable=True),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "restaurant_id",
            sa.Integer(),
            sa.ForeignKey("restaurants.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("restaurant_name", sa.String(length=100), nullable=False),
        sa.Column("review_type", sa.String(length=20), nullable=False, server_default="dine_in"),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("food_rating", sa.Integer(), server_default="0"),
        sa.Column("service_rating", sa.Integer(), server_default="0"),
        sa.Column("atmosphere_rating", sa.Integer(), server_default="0"),
        sa.Column("price_rating", sa.Integer(), server_default="0"),
        sa.Column("cleanliness_rating", sa.Integer(), server_default="0"),
        sa.Column("delivery_speed_rating", sa.Integer(), server_default="0"),
        sa.Column("delivery_quality_rating", sa.Integer(), server_default="0"),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("response", sa.Text(), nullable=True),
        sa.Column("response_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "responded_by",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("manager_name", sa.String(length=100), nullable=True),
        sa.Column("deleted", sa.Boolean(), nullable=True, server_default=_false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_restaurant_id", "reviews", ["restaurant_id"])

    op.create_table(
        "review_photos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("review_id", sa.Integer(), sa.ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False),
        sa.Column("photo_url", sa.String(length=500), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
    )
    op.create_index("ix_review_photos_review_id", "review_photos", ["review_id"])

    op.create_table(
        "review_votes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("review_id", sa.Integer(), sa.ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("vote_type", sa.String(length=4), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
        sa.UniqueConstraint("review_id", "user_id", name="uq_review_vote"),
    )

    op.create_table(
        "deleted_reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("review_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("user_name", sa.String(length=100), nullable=True),
        sa.Column("restaurant_id", sa.Integer(), nullable=True),
        sa.Column("restaurant_name", sa.String(length=100), nullable=False),
        sa.Column("review_type", sa.String(length=20), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("food_rating", sa.Integer(), server_default="0"),
        sa.Column("service_rating", sa.Integer(), server_default="0"),
        sa.Column("atmosphere_rating", sa.Integer(), server_default="0"),
        sa.Column("price_rating", sa.Integer(), server_default="0"),
        sa.Column("cleanliness_rating", sa.Integer(), server_default="0"),
        sa.Column("delivery_speed_rating", sa.Integer(), server_default="0"),
        sa.Column("delivery_quality_rating", sa.Integer(), server_default="0"),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("original_created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "deleted_by",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("deletion_reason", sa.Text(), nullable=False),
        sa.Column("admin_name", sa.String(length=100), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), server_default=_now()),
        sa.CheckConstraint("length(trim(deletion_reason)) > 0", name="ck_deleted_reviews_reason"),
    )
    op.create_index("ix_deleted_reviews_review_id", "deleted_reviews", ["review_id"])
    op.create_index("ix_deleted_reviews_user_id", "deleted_reviews", ["user_id"])
    op.create_index("ix_deleted_reviews_deleted_by", "deleted_reviews", ["deleted_by"])
    op.create_index("ix_deleted_reviews_deleted_at", "deleted_reviews", ["deleted_at"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="info"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=_false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "support_tickets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default="medium"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=_now()),
    )
    op.create_index("ix_support_tickets_user_id", "support_tickets", ["user_id"])
    op.create_index("ix_support_tickets_status", "support_tickets", ["status"])

    op.create_table(
        "support_messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "ticket_id",
            sa.Integer(),
            sa.ForeignKey("support_tickets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_staff", sa.Boolean(), nullable=False, server_default=_false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_now()),
    )
    op.create_index("ix_support_messages_ticket_id", "support_messages", ["ticket_id"])


def downgrade():
    op.drop_table("support_messages")
    op.drop_table("support_tickets")
    op.drop_table("notifications")
    op.drop_table("deleted_reviews")
    op.drop_table("review_votes")
    op.drop_table("review_photos")
    op.drop_table("reviews")
    op.drop_table("users")
    op.drop_table("restaurants")
