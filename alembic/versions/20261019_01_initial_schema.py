"""Create users, posts, games and bonuses tables.

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 00:00:00
"""

# pylint: disable=invalid-name,missing-module-docstring

from __future__ import annotations

import sqlalchemy as sa
from fastapi_users_db_sqlalchemy.generics import GUID

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade():
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", GUID(), primary_key=True),
            sa.Column("email", sa.String(length=320), nullable=False),
            sa.Column("hashed_password", sa.String(length=1024), nullable=False),
            sa.Column(
                "is_active", sa.Boolean(), nullable=False, server_default=sa.true()
            ),
            sa.Column(
                "is_superuser", sa.Boolean(), nullable=False, server_default=sa.false()
            ),
            sa.Column(
                "is_verified", sa.Boolean(), nullable=False, server_default=sa.false()
            ),
            sa.Column("username", sa.String(length=50), nullable=True),
            sa.Column("first_name", sa.String(length=100), nullable=True),
            sa.Column("last_name", sa.String(length=100), nullable=True),
            sa.Column(
                "role", sa.String(length=20), nullable=False, server_default="player"
            ),
            sa.Column(
                "status", sa.String(length=20), nullable=False, server_default="active"
            ),
            _timestamp("created_at"),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)
        op.create_index("ix_users_username", "users", ["username"], unique=True)
        op.create_index("ix_users_role", "users", ["role"])
        op.create_index("ix_users_status", "users", ["status"])
        op.create_index("ix_users_created_at", "users", ["created_at"])

    if not inspector.has_table("posts"):
        op.create_table(
            "posts",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("slug", sa.String(length=200), nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("excerpt", sa.String(length=500), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("category", sa.String(length=50), nullable=False),
            sa.Column("tags", sa.Text(), nullable=False, server_default="[]"),
            sa.Column("keywords", sa.Text(), nullable=False, server_default="[]"),
            sa.Column("featured_image_url", sa.String(length=500), nullable=True),
            sa.Column("featured_image_alt", sa.String(length=200), nullable=True),
            sa.Column("meta_title", sa.String(length=60), nullable=True),
            sa.Column("meta_description", sa.String(length=160), nullable=True),
            sa.Column(
                "is_featured", sa.Boolean(), nullable=False, server_default="0"
            ),
            sa.Column(
                "is_trending", sa.Boolean(), nullable=False, server_default="0"
            ),
            sa.Column("is_sticky", sa.Boolean(), nullable=False, server_default="0"),
            sa.Column(
                "comments_enabled", sa.Boolean(), nullable=False, server_default="1"
            ),
            sa.Column(
                "status", sa.String(length=20), nullable=False, server_default="draft"
            ),
            sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=True),
            sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("shares", sa.Integer(), nullable=False, server_default="0"),
            sa.Column(
                "reading_time", sa.Integer(), nullable=False, server_default="0"
            ),
            sa.Column(
                "author_id",
                GUID(),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("author_name", sa.String(length=150), nullable=False),
            _timestamp("created_at"),
            _timestamp("updated_at"),
        )
        op.create_index("ix_posts_id", "posts", ["id"])
        op.create_index("ix_posts_slug", "posts", ["slug"], unique=True)
        for column in (
            "category",
            "status",
            "is_featured",
            "is_trending",
            "published_at",
            "author_id",
            "created_at",
        ):
            op.create_index(f"ix_posts_{column}", "posts", [column])
        op.create_index("ix_posts_category_status", "posts", ["category", "status"])
        op.create_index(
            "ix_posts_status_published_at", "posts", ["status", "published_at"]
        )

    if not inspector.has_table("games"):
        op.create_table(
            "games",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("slug", sa.String(length=200), nullable=False),
            sa.Column("category", sa.String(length=50), nullable=False),
            sa.Column("provider", sa.String(length=100), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("image_url", sa.String(length=500), nullable=True),
            sa.Column("rtp", sa.Float(), nullable=True),
            sa.Column("min_bet", sa.Float(), nullable=True),
            sa.Column("max_bet", sa.Float(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
            sa.Column(
                "is_featured", sa.Boolean(), nullable=False, server_default="0"
            ),
            sa.Column("is_hot", sa.Boolean(), nullable=False, server_default="0"),
            sa.Column("popularity", sa.Integer(), nullable=False, server_default="0"),
            _timestamp("created_at"),
        )
        op.create_index("ix_games_id", "games", ["id"])
        op.create_index("ix_games_slug", "games", ["slug"], unique=True)
        op.create_index("ix_games_category", "games", ["category"])
        op.create_index("ix_games_provider", "games", ["provider"])
        op.create_index("ix_games_created_at", "games", ["created_at"])

    if not inspector.has_table("bonuses"):
        op.create_table(
            "bonuses",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("type", sa.String(length=30), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("amount", sa.Float(), nullable=True),
            sa.Column("percentage", sa.Float(), nullable=True),
            sa.Column("code", sa.String(length=50), nullable=True),
            sa.Column(
                "requires_code", sa.Boolean(), nullable=False, server_default="0"
            ),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
            _timestamp("start_date"),
            sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
            _timestamp("created_at"),
        )
        op.create_index("ix_bonuses_id", "bonuses", ["id"])
        op.create_index("ix_bonuses_type", "bonuses", ["type"])
        op.create_index("ix_bonuses_created_at", "bonuses", ["created_at"])


def downgrade():
    for table in ("bonuses", "games", "posts", "users"):
        op.drop_table(table)
