from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# ENUMERATIONS
# ============================================================================


class Theme(str, enum.Enum):
    LIGHT = "LIGHT"
    DARK = "DARK"
    SYSTEM = "SYSTEM"


class FontSize(str, enum.Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class LineHeight(str, enum.Enum):
    NORMAL = "NORMAL"
    WIDE = "WIDE"


class ReportReason(str, enum.Enum):
    SPAM = "SPAM"
    HARASSMENT = "HARASSMENT"
    HATE_SPEECH = "HATE_SPEECH"
    INAPPROPRIATE_CONTENT = "INAPPROPRIATE_CONTENT"
    MISINFORMATION = "MISINFORMATION"
    COPYRIGHT = "COPYRIGHT"
    OTHER = "OTHER"


class ReportStatus(str, enum.Enum):
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class LogAction(str, enum.Enum):
    UPDATE_PROFILE = "UPDATE_PROFILE"
    SUSPEND_USER = "SUSPEND_USER"
    ACTIVATE_USER = "ACTIVATE_USER"
    RESTORE_USER = "RESTORE_USER"
    SUSPEND_POST = "SUSPEND_POST"
    DELETE_POST = "DELETE_POST"
    RESTORE_POST = "RESTORE_POST"
    FEATURE_POST = "FEATURE_POST"
    DELETE_COMMENT = "DELETE_COMMENT"
    CREATE_CATEGORY = "CREATE_CATEGORY"
    DELETE_CATEGORY = "DELETE_CATEGORY"
    UPDATE_REPORT = "UPDATE_REPORT"
    OTHER = "OTHER"


# ============================================================================
# USERS
# ============================================================================


class User(Base):
    """Author/reader account."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(50), unique=True, nullable=False, index=True)  # stored lower-case
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Account state
    is_active = Column(Boolean, nullable=False, default=True)
    suspended = Column(Boolean, nullable=False, default=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    # Relationships
    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    settings = relationship(
        "UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    posts = relationship("Post", back_populates="author")
    comments = relationship("Comment", back_populates="author")

    @property
    def display_name(self) -> str | None:
        return self.profile.display_name if self.profile else None

    @property
    def avatar_url(self) -> str | None:
        return self.profile.avatar_url if self.profile else None


class Profile(Base):
    """Public-facing profile details (1:1 with User)."""

    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )

    display_name = Column(String(50), nullable=False)
    avatar_url = Column(String(500), nullable=True)
    avatar_path = Column(String(500), nullable=True)
    cover_url = Column(String(500), nullable=True)
    cover_path = Column(String(500), nullable=True)
    bio = Column(String(160), nullable=True)
    nationality = Column(String(60), nullable=True)
    socials = Column(JSON, nullable=False, default=list)  # [{"media": ..., "link": ...}]

    user = relationship("User", back_populates="profile")


class UserSettings(Base):
    """Reading preferences (1:1 with User)."""

    __tablename__ = "settings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )

    theme = Column(String(10), nullable=False, default=Theme.SYSTEM.value)
    font_size = Column(String(10), nullable=False, default=FontSize.MEDIUM.value)
    line_height = Column(String(10), nullable=False, default=LineHeight.NORMAL.value)
    notifications = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="settings")


# ============================================================================
# CONTENT
# ============================================================================


class Category(Base):
    """Topic a post is filed under."""

    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), unique=True, nullable=False)
    slug = Column(String(60), unique=True, nullable=False, index=True)
    description = Column(String(200), nullable=True)
    color_light = Column(String(20), nullable=True)
    color_dark = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    posts = relationship("Post", back_populates="category")


class Post(Base):
    """Blog post. Content is an editor document saved separately from the details."""

    __tablename__ = "posts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    slug = Column(String(140), unique=True, nullable=False, index=True)
    summary = Column(Text, nullable=True)
    cover_url = Column(String(500), nullable=True)
    cover_path = Column(String(500), nullable=True)
    content = Column(JSON(none_as_null=True), nullable=True)  # {"time", "blocks", "version"}

    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False, index=True)
    author_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Publication & moderation state
    published = Column(Boolean, nullable=False, default=False, index=True)
    suspended = Column(Boolean, nullable=False, default=False, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)  # soft trash
    is_featured = Column(Boolean, nullable=False, default=False, index=True)

    views = Column(Integer, nullable=False, default=0)
    read_time = Column(Integer, nullable=False, default=0)  # minutes

    # Timestamps
    published_at = Column(DateTime(timezone=True), nullable=True, index=True)  # first publish only
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    author = relationship("User", back_populates="posts")
    category = relationship("Category", back_populates="posts")
    tag_rows = relationship(
        "PostTag", back_populates="post", cascade="all, delete-orphan", order_by="PostTag.position"
    )
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")

    @property
    def tags(self) -> list[str]:
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values: list[str]) -> None:
        # Diff against the current rows so an unchanged tag keeps its row
        wanted = list(dict.fromkeys(values))
        existing = {row.tag: row for row in self.tag_rows}
        rows = []
        for position, tag in enumerate(wanted):
            row = existing.get(tag) or PostTag(tag=tag)
            row.position = position
            rows.append(row)
        self.tag_rows = rows


class PostTag(Base):
    """One tag of a post."""

    __tablename__ = "post_tags"

    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    tag = Column(String(50), primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    post = relationship("Post", back_populates="tag_rows")

    __table_args__ = (Index("ix_post_tags_tag", "tag"),)


class Comment(Base):
    """Comment on a post."""

    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    content = Column(String(650), nullable=False)
    author_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    post_id = Column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    is_edited = Column(Boolean, nullable=False, default=False)
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    # Relationships
    post = relationship("Post", back_populates="comments")
    author = relationship("User", back_populates="comments")
    likes = relationship("CommentLike", back_populates="comment", cascade="all, delete-orphan")


# ============================================================================
# RELATIONSHIPS & REACTIONS
# ============================================================================


class PostLike(Base):
    """Existence means the user liked the post."""

    __tablename__ = "post_likes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    post = relationship("Post", back_populates="likes")

    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_post_like_user_post"),)


class CommentLike(Base):
    """Existence means the user liked the comment."""

    __tablename__ = "comment_likes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    comment_id = Column(
        Uuid, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    comment = relationship("Comment", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_comment_like_user_comment"),
    )


class Subscription(Base):
    """Existence means subscriber follows subscribed."""

    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    subscriber_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    subscribed_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("subscriber_id", "subscribed_id", name="uq_subscription_pair"),
        CheckConstraint("subscriber_id <> subscribed_id", name="ck_subscription_not_self"),
    )


class Block(Base):
    """Existence means blocker has blocked blocked."""

    __tablename__ = "blocks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    blocker_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    blocked_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    blocked = relationship("User", foreign_keys=[blocked_id])

    __table_args__ = (UniqueConstraint("blocker_id", "blocked_id", name="uq_block_pair"),)


# ============================================================================
# MODERATION
# ============================================================================


class Report(Base):
    """User-submitted report against a user, post, or comment."""

    __tablename__ = "reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    reporter_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reported_user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="SET NULL"), nullable=True)
    comment_id = Column(Uuid, ForeignKey("comments.id", ondelete="SET NULL"), nullable=True)

    reason = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False, default=ReportStatus.PENDING.value, index=True)
    message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    reporter = relationship("User", foreign_keys=[reporter_id])
    reported_user = relationship("User", foreign_keys=[reported_user_id])


class Admin(Base):
    """Moderator account, separate from the User identity space."""

    __tablename__ = "admins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    admin_code = Column(String(20), unique=True, nullable=False)  # ADM-YYYYMMDD-NNNN
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    number = Column(String(30), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    avatar_path = Column(String(500), nullable=True)

    is_super_admin = Column(Boolean, nullable=False, default=False)
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    logs = relationship("Log", back_populates="admin")


class Log(Base):
    """Audit record of an admin action."""

    __tablename__ = "logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    admin_id = Column(Uuid, ForeignKey("admins.id"), nullable=False, index=True)
    action = Column(String(30), nullable=False, index=True)
    description = Column(Text, nullable=False)
    meta = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    admin = relationship("Admin", back_populates="logs")
