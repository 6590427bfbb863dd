from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, Generic, Literal, TypeVar
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .models import FontSize, LineHeight, LogAction, ReportReason, ReportStatus, Theme


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ============================================================================
# BASE SCHEMAS
# ============================================================================


class ErrorResponse(CamelModel):
    status: Literal["error"] = "error"
    message: str
    logout: bool = False


class MessageResponse(CamelModel):
    message: str


class Pagination(CamelModel):
    total: int
    page: int
    total_pages: int


T = TypeVar("T")


class Page(CamelModel, Generic[T]):
    """Generic paginated response."""

    items: list[T]
    pagination: Pagination


class HealthResponse(CamelModel):
    """Health check response."""

    status: Literal["ok"] = "ok"
    uptime_s: float | None = None


class ImageUpload(CamelModel):
    """Base64 image, optionally as a data URI (data:image/png;base64,...)."""

    image: str = Field(..., min_length=1)


class ImageUploadResponse(CamelModel):
    url: str
    path: str


# ============================================================================
# EDITOR CONTENT
# ============================================================================


class EditorBlock(CamelModel):
    """One block of an editor document. Unknown block types pass through untouched."""

    id: str | None = None
    type: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_known_block(self) -> "EditorBlock":
        data = self.data
        if self.type in ("paragraph", "quote"):
            if not isinstance(data.get("text"), str):
                raise ValueError(f"{self.type} block requires text")
        elif self.type == "header":
            if not isinstance(data.get("text"), str):
                raise ValueError("header block requires text")
            level = data.get("level")
            if not isinstance(level, int) or not 1 <= level <= 6:
                raise ValueError("header level must be between 1 and 6")
        elif self.type == "list":
            if data.get("style") not in ("ordered", "unordered"):
                raise ValueError("list style must be ordered or unordered")
            if not isinstance(data.get("items"), list):
                raise ValueError("list block requires items")
        elif self.type == "image":
            file = data.get("file")
            if not isinstance(file, dict) or not isinstance(file.get("url"), str):
                raise ValueError("image block requires file.url")
        elif self.type == "code":
            if not isinstance(data.get("code"), str):
                raise ValueError("code block requires code")
        return self


class EditorDocument(CamelModel):
    time: int
    blocks: list[EditorBlock] = Field(..., min_length=1)
    version: str


# ============================================================================
# USER SCHEMAS
# ============================================================================

USERNAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]*$"
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


EmailAddress = Annotated[str, Field(max_length=255), AfterValidator(_normalize_email)]


class SignupRequest(CamelModel):
    username: str = Field(..., min_length=8, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailAddress
    password: str = Field(..., min_length=8, max_length=128)
    display_name: str = Field(..., min_length=2, max_length=50)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)


class EmailUpdate(CamelModel):
    email: EmailAddress


class UsernameUpdate(CamelModel):
    username: str = Field(..., min_length=8, max_length=50, pattern=USERNAME_PATTERN)


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)


class SocialLink(CamelModel):
    media: str = Field(..., min_length=1, max_length=30)
    link: str = Field(..., max_length=500, pattern=r"^https?://\S+$")


class ProfileUpdate(CamelModel):
    """Explicit patch: only the fields sent are changed."""

    display_name: str | None = Field(None, min_length=2, max_length=50)
    bio: str | None = Field(None, max_length=160)
    nationality: str | None = Field(None, max_length=60)
    socials: list[SocialLink] | None = Field(None, max_length=10)


class SettingsOut(CamelModel):
    theme: Theme
    font_size: FontSize
    line_height: LineHeight
    notifications: bool


class SettingsUpdate(CamelModel):
    theme: Theme | None = None
    font_size: FontSize | None = None
    line_height: LineHeight | None = None
    notifications: bool | None = None


class ProfileOut(CamelModel):
    display_name: str
    avatar_url: str | None = None
    cover_url: str | None = None
    bio: str | None = None
    nationality: str | None = None
    socials: list[SocialLink] = []


class UserAccount(CamelModel):
    """The signed-in user's own account view."""

    id: UUID
    username: str
    email: str
    suspended: bool
    created_at: datetime
    profile: ProfileOut
    settings: SettingsOut


class AuthorSummary(CamelModel):
    id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None


class AuthorDetail(AuthorSummary):
    bio: str | None = None
    is_following: bool = False


class RankedUser(AuthorSummary):
    posts_count: int
    likes_received: int
    comments_received: int
    score: int


class UserSearchResult(AuthorSummary):
    published_posts: int


class ProfileStats(CamelModel):
    posts: int
    subscribers: int
    subscribing: int


# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================


class CategorySummary(CamelModel):
    id: UUID
    name: str
    slug: str
    color_light: str | None = None
    color_dark: str | None = None


class CategoryOut(CategorySummary):
    description: str | None = None


class CategoryWithCount(CategoryOut):
    post_count: int


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=3, max_length=50)
    description: str | None = Field(None, max_length=200)
    color_light: str | None = Field(None, max_length=20)
    color_dark: str | None = Field(None, max_length=20)


class CategoryUpdate(CamelModel):
    name: str | None = Field(None, min_length=3, max_length=50)
    description: str | None = Field(None, max_length=200)
    color_light: str | None = Field(None, max_length=20)
    color_dark: str | None = Field(None, max_length=20)


# ============================================================================
# POST SCHEMAS
# ============================================================================


def _normalize_tags(values: list[str]) -> list[str]:
    tags = list(dict.fromkeys(tag.strip().lower() for tag in values if tag and tag.strip()))
    if not tags:
        raise ValueError("At least one tag is required")
    if any(len(tag) > 50 for tag in tags):
        raise ValueError("Tags must be at most 50 characters")
    return tags


TagList = Annotated[list[str], Field(min_length=1, max_length=10), AfterValidator(_normalize_tags)]


class PostCreate(CamelModel):
    title: str = Field(..., min_length=5, max_length=100)
    summary: str | None = Field(None, min_length=5, max_length=450)
    category_id: UUID
    tags: TagList
    cover_image: str | None = None  # base64 / data URI


class PostUpdate(CamelModel):
    """Explicit patch for post details. Content is saved through its own operation."""

    title: str | None = Field(None, min_length=5, max_length=100)
    summary: str | None = Field(None, min_length=5, max_length=450)
    category_id: UUID | None = None
    tags: TagList | None = None
    cover_image: str | None = None


class PostCard(CamelModel):
    """Post as shown in lists and feeds."""

    id: UUID
    title: str
    slug: str
    summary: str | None = None
    tags: list[str] = []
    cover_url: str | None = None
    category: CategorySummary
    author: AuthorSummary
    views: int
    read_time: int
    is_featured: bool
    published_at: datetime | None = None
    created_at: datetime

    # Annotations, filled in by services.post_stats
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False


class FeedPost(PostCard):
    is_subscribed_author: bool = False
    source: Literal["subscribed", "featured", "popular"] | None = None


class PrivateFeed(CamelModel):
    feed: list[FeedPost]
    popular_users: list[RankedUser]


class PublicFeed(CamelModel):
    featured: list[PostCard]
    categories: list[CategoryWithCount]


class CommentView(CamelModel):
    id: UUID
    content: str
    is_edited: bool
    created_at: datetime
    author: AuthorSummary
    like_count: int = 0
    is_liked: bool = False


class PostDetail(PostCard):
    """Single post view, flattened: no raw like or comment rows."""

    content: dict[str, Any]
    updated_at: datetime
    author: AuthorDetail
    comments: list[CommentView] = []


class AuthorPost(PostCard):
    """Post as listed on its author's dashboard, including drafts and trash."""

    published: bool
    suspended: bool
    is_deleted: bool
    updated_at: datetime


class PostEditView(CamelModel):
    id: UUID
    title: str
    slug: str
    summary: str | None = None
    tags: list[str] = []
    cover_url: str | None = None
    category_id: UUID
    content: dict[str, Any] | None = None
    published: bool
    suspended: bool
    is_deleted: bool
    read_time: int
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ViewCount(CamelModel):
    views: int


class ExploreResult(CamelModel):
    posts: list[PostCard]
    users: list[UserSearchResult]


class PublicProfile(CamelModel):
    id: UUID
    username: str
    display_name: str
    avatar_url: str | None = None
    cover_url: str | None = None
    bio: str | None = None
    nationality: str | None = None
    socials: list[SocialLink] = []
    created_at: datetime
    is_blocked: bool = False
    is_following: bool = False
    is_me: bool = False
    stats: ProfileStats
    latest_posts: list[PostCard] = []


# ============================================================================
# COMMENTS, TOGGLES
# ============================================================================


class CommentCreate(CamelModel):
    post_id: UUID
    content: str = Field(..., min_length=1, max_length=650)


class CommentUpdate(CamelModel):
    content: str = Field(..., min_length=1, max_length=650)


class CommentOut(CamelModel):
    id: UUID
    post_id: UUID
    content: str
    is_edited: bool
    created_at: datetime


class LikeState(CamelModel):
    liked: bool
    like_count: int


class SubscriptionState(CamelModel):
    subscribed: bool
    subscribers: int


class BlockState(CamelModel):
    blocked: bool


# ============================================================================
# REPORTS
# ============================================================================


class ReportCreate(CamelModel):
    reported_user_id: UUID | None = None
    post_id: UUID | None = None
    comment_id: UUID | None = None
    reason: ReportReason
    message: str | None = Field(None, max_length=500)


class ReportOut(CamelModel):
    id: UUID
    reporter_id: UUID
    reported_user_id: UUID | None = None
    post_id: UUID | None = None
    comment_id: UUID | None = None
    reason: ReportReason
    status: ReportStatus
    message: str | None = None
    created_at: datetime


class ReportStatusUpdate(CamelModel):
    status: ReportStatus


# ============================================================================
# ADMIN SCHEMAS
# ============================================================================


class AdminCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailAddress
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=2, max_length=100)
    number: str | None = Field(None, max_length=30)
    avatar: str | None = None  # base64 / data URI
    is_super_admin: bool = False


class AdminLogin(CamelModel):
    email: EmailAddress
    password: str = Field(..., min_length=1, max_length=128)


class AdminProfileUpdate(CamelModel):
    username: str | None = Field(None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    name: str | None = Field(None, min_length=2, max_length=100)
    number: str | None = Field(None, max_length=30)


class AdminOut(CamelModel):
    id: UUID
    admin_code: str
    username: str
    email: str
    name: str
    number: str | None = None
    avatar_url: str | None = None
    is_super_admin: bool
    is_deleted: bool
    created_at: datetime


class ModerationRequest(CamelModel):
    reason: str | None = Field(None, max_length=500)


class AdminUserRow(CamelModel):
    id: UUID
    username: str
    email: str
    display_name: str | None = None
    is_active: bool
    suspended: bool
    created_at: datetime


class AdminPostRow(CamelModel):
    id: UUID
    title: str
    slug: str
    author: AuthorSummary
    published: bool
    suspended: bool
    is_deleted: bool
    is_featured: bool
    views: int
    created_at: datetime


class LogOut(CamelModel):
    id: UUID
    admin_id: UUID
    action: LogAction
    description: str
    meta: dict[str, Any] = {}
    created_at: datetime


class LogUpdate(CamelModel):
    description: str | None = Field(None, min_length=1, max_length=1000)
    meta: dict[str, Any] | None = None


class LogStats(CamelModel):
    total: int
    by_action: dict[str, int]
