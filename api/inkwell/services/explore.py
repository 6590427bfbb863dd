"""Keyword search over posts and users."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, contains_eager

from .. import models, schemas
from ..utils.visibility import visible_post_criteria, visible_user_criteria
from .post_stats import annotate_posts_with_counts, card_load_options, comment_count_expr
from .relationships import blocked_user_ids

POST_LIMIT = 20
USER_LIMIT = 10

SORT_MODES = ("latest", "popular", "trending")


def _post_order(sort: str) -> list:
    if sort == "popular":
        return [models.Post.views.desc(), models.Post.created_at.desc()]
    if sort == "trending":
        return [comment_count_expr().desc(), models.Post.created_at.desc()]
    return [models.Post.created_at.desc()]


def search_posts(db: Session, q: str, sort: str, blocked: set[UUID]) -> list[models.Post]:
    """
    Posts whose title or category name contains q (any case), or tagged exactly q.

    Tags are stored lower-case, so the tag match is case-insensitive too.
    """
    match = or_(
        models.Post.title.icontains(q, autoescape=True),
        models.Post.category.has(models.Category.name.icontains(q, autoescape=True)),
        models.Post.tag_rows.any(models.PostTag.tag == q.lower()),
    )
    return (
        db.query(models.Post)
        .options(*card_load_options())
        .filter(match, *visible_post_criteria(blocked))
        .order_by(*_post_order(sort), models.Post.id)
        .limit(POST_LIMIT)
        .all()
    )


def search_users(db: Session, q: str, blocked: set[UUID]) -> list[schemas.UserSearchResult]:
    """Active users whose username or display name contains q, most published first."""
    published_posts = (
        select(func.count(models.Post.id))
        .where(
            models.Post.author_id == models.User.id,
            models.Post.published.is_(True),
            models.Post.is_deleted.is_(False),
            models.Post.suspended.is_(False),
        )
        .correlate(models.User)
        .scalar_subquery()
        .label("published_posts")
    )
    rows = (
        db.query(models.User, published_posts)
        .join(models.Profile, models.Profile.user_id == models.User.id)
        .options(contains_eager(models.User.profile))
        .filter(
            or_(
                models.User.username.icontains(q, autoescape=True),
                models.Profile.display_name.icontains(q, autoescape=True),
            ),
            *visible_user_criteria(blocked),
        )
        .order_by(published_posts.desc(), models.User.username)
        .limit(USER_LIMIT)
        .all()
    )
    return [
        schemas.UserSearchResult(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            published_posts=count or 0,
        )
        for user, count in rows
    ]


def explore(db: Session, q: str | None, sort: str | None = None, viewer_id: UUID | None = None) -> schemas.ExploreResult:
    """
    Search posts and users.

    An empty or whitespace-only query returns empty lists without touching the
    database. Unknown sort values fall back to "latest".
    """
    q = (q or "").strip()
    if not q:
        return schemas.ExploreResult(posts=[], users=[])
    if sort not in SORT_MODES:
        sort = "latest"

    blocked = blocked_user_ids(db, viewer_id)
    posts = search_posts(db, q, sort, blocked)
    annotate_posts_with_counts(db, posts, viewer_id, blocked)
    return schemas.ExploreResult(
        posts=[schemas.PostCard.model_validate(post) for post in posts],
        users=search_users(db, q, blocked),
    )
