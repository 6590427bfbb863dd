"""initial schema

Revision ID: 202610010001
Revises:
Create Date: 2026-10-01 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "202610010001"
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Uuid(), primary_key=True)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("suspended", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_suspended", "users", ["suspended"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "profiles",
        _id(),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("display_name", sa.String(length=50), nullable=False),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("avatar_path", sa.String(length=500), nullable=True),
        sa.Column("cover_url", sa.String(length=500), nullable=True),
        sa.Column("cover_path", sa.String(length=500), nullable=True),
        sa.Column("bio", sa.String(length=160), nullable=True),
        sa.Column("nationality", sa.String(length=60), nullable=True),
        sa.Column("socials", sa.JSON(), nullable=False),
    )

    op.create_table(
        "settings",
        _id(),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("theme", sa.String(length=10), nullable=False, server_default="SYSTEM"),
        sa.Column("font_size", sa.String(length=10), nullable=False, server_default="MEDIUM"),
        sa.Column("line_height", sa.String(length=10), nullable=False, server_default="NORMAL"),
        sa.Column("notifications", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    # Content
    op.create_table(
        "categories",
        _id(),
        sa.Column("name", sa.String(length=50), nullable=False, unique=True),
        sa.Column("slug", sa.String(length=60), nullable=False),
        sa.Column("description", sa.String(length=200), nullable=True),
        sa.Column("color_light", sa.String(length=20), nullable=True),
        sa.Column("color_dark", sa.String(length=20), nullable=True),
        _created_at(),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)

    op.create_table(
        "posts",
        _id(),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=140), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("cover_url", sa.String(length=500), nullable=True),
        sa.Column("cover_path", sa.String(length=500), nullable=True),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("category_id", sa.Uuid(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("suspended", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("read_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_posts_slug", "posts", ["slug"], unique=True)
    for column in ("category_id", "author_id", "published", "suspended", "is_deleted", "is_featured", "published_at", "created_at"):
        op.create_index(f"ix_posts_{column}", "posts", [column])

    op.create_table(
        "post_tags",
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag", sa.String(length=50), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_post_tags_tag", "post_tags", ["tag"])

    op.create_table(
        "comments",
        _id(),
        sa.Column("content", sa.String(length=650), nullable=False),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_edited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_comments_author_id", "comments", ["author_id"])
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_index("ix_comments_created_at", "comments", ["created_at"])

    # Relationships & reactions
    op.create_table(
        "post_likes",
        _id(),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
        sa.UniqueConstraint("user_id", "post_id", name="uq_post_like_user_post"),
    )
    op.create_index("ix_post_likes_post_id", "post_likes", ["post_id"])

    op.create_table(
        "comment_likes",
        _id(),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("comment_id", sa.Uuid(), sa.ForeignKey("comments.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
        sa.UniqueConstraint("user_id", "comment_id", name="uq_comment_like_user_comment"),
    )
    op.create_index("ix_comment_likes_comment_id", "comment_likes", ["comment_id"])

    op.create_table(
        "subscriptions",
        _id(),
        sa.Column("subscriber_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("subscribed_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
        sa.UniqueConstraint("subscriber_id", "subscribed_id", name="uq_subscription_pair"),
        sa.CheckConstraint("subscriber_id <> subscribed_id", name="ck_subscription_not_self"),
    )
    op.create_index("ix_subscriptions_subscribed_id", "subscriptions", ["subscribed_id"])

    op.create_table(
        "blocks",
        _id(),
        sa.Column("blocker_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("blocked_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_block_pair"),
    )
    op.create_index("ix_blocks_blocked_id", "blocks", ["blocked_id"])

    # Moderation
    op.create_table(
        "reports",
        _id(),
        sa.Column("reporter_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reported_user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="SET NULL"), nullable=True),
        sa.Column("comment_id", sa.Uuid(), sa.ForeignKey("comments.id", ondelete="SET NULL"), nullable=True),
        sa.Column("reason", sa.String(length=30), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("message", sa.Text(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_reports_reporter_id", "reports", ["reporter_id"])
    op.create_index("ix_reports_reported_user_id", "reports", ["reported_user_id"])
    op.create_index("ix_reports_status", "reports", ["status"])
    op.create_index("ix_reports_created_at", "reports", ["created_at"])

    op.create_table(
        "admins",
        _id(),
        sa.Column("admin_code", sa.String(length=20), nullable=False, unique=True),
        sa.Column("username", sa.String(length=50), nullable=False, unique=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("number", sa.String(length=30), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("avatar_path", sa.String(length=500), nullable=True),
        sa.Column("is_super_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_admins_email", "admins", ["email"], unique=True)

    op.create_table(
        "logs",
        _id(),
        sa.Column("admin_id", sa.Uuid(), sa.ForeignKey("admins.id"), nullable=False),
        sa.Column("action", sa.String(length=30), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("meta", sa.JSON(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_logs_admin_id", "logs", ["admin_id"])
    op.create_index("ix_logs_action", "logs", ["action"])
    op.create_index("ix_logs_created_at", "logs", ["created_at"])


def downgrade() -> None:
    for table in (
        "logs",
        "admins",
        "reports",
        "blocks",
        "subscriptions",
        "comment_likes",
        "post_likes",
        "comments",
        "post_tags",
        "posts",
        "categories",
        "settings",
        "profiles",
        "users",
    ):
        op.drop_table(table)
