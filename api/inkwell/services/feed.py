"""
Feed assembly.

The private feed is three capped pools (subscribed, featured, popular) run one
after another on the request's session, concatenated in that order. A post may
appear in more than one pool; the pool a copy came from is carried in its
``source``.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..errors import ForbiddenError
from ..utils.visibility import visible_post_criteria, visible_user_criteria
from .post_stats import (
    annotate_posts_with_counts,
    card_load_options,
    comment_count_expr,
    like_count_expr,
)
from .relationships import blocked_user_ids, subscribed_user_ids

logger = logging.getLogger(__name__)

SUBSCRIBED_POOL_SIZE = 10
FEATURED_POOL_SIZE = 5
POPULAR_POOL_SIZE = 10
POPULAR_USERS_SIZE = 10

PUBLIC_FEATURED_SIZE = 6
PUBLIC_CATEGORIES_SIZE = 5


def _visible_posts(db: Session, blocked: set[UUID]):
    return (
        db.query(models.Post)
        .options(*card_load_options())
        .filter(*visible_post_criteria(blocked))
    )


def subscribed_pool(db: Session, followed: set[UUID], blocked: set[UUID]) -> list[models.Post]:
    if not followed:
        return []
    return (
        _visible_posts(db, blocked)
        .filter(models.Post.author_id.in_(list(followed)))
        .order_by(models.Post.published_at.desc(), models.Post.id)
        .limit(SUBSCRIBED_POOL_SIZE)
        .all()
    )


def featured_pool(db: Session, blocked: set[UUID], limit: int = FEATURED_POOL_SIZE) -> list[models.Post]:
    return (
        _visible_posts(db, blocked)
        .filter(models.Post.is_featured.is_(True), models.Post.published_at.is_not(None))
        .order_by(models.Post.published_at.desc(), models.Post.id)
        .limit(limit)
        .all()
    )


def popular_pool(db: Session, followed: set[UUID], blocked: set[UUID]) -> list[models.Post]:
    """Posts by authors the viewer does not follow: views, then likes, then comments."""
    query = _visible_posts(db, blocked)
    if followed:
        query = query.filter(models.Post.author_id.notin_(list(followed)))
    return (
        query.order_by(
            models.Post.views.desc(),
            like_count_expr().desc(),
            comment_count_expr().desc(),
            models.Post.published_at.desc(),
            models.Post.id,
        )
        .limit(POPULAR_POOL_SIZE)
        .all()
    )


def popular_users(db: Session, blocked: set[UUID]) -> list[schemas.RankedUser]:
    """
    Top users by postsCount + 2 x likesReceived + commentsReceived.

    Counts only cover the users' visible posts and their non-deleted comments.
    Active users with nothing published rank too, scoring 0.
    """
    visible = (
        db.query(models.Post.id.label("post_id"), models.Post.author_id.label("author_id"))
        .filter(*visible_post_criteria())
        .subquery()
    )
    likes = (
        db.query(models.PostLike.post_id.label("post_id"), func.count(models.PostLike.id).label("n"))
        .group_by(models.PostLike.post_id)
        .subquery()
    )
    comments = (
        db.query(models.Comment.post_id.label("post_id"), func.count(models.Comment.id).label("n"))
        .filter(models.Comment.is_deleted.is_(False))
        .group_by(models.Comment.post_id)
        .subquery()
    )
    per_author = (
        db.query(
            visible.c.author_id.label("author_id"),
            func.count(visible.c.post_id).label("posts_count"),
            func.coalesce(func.sum(likes.c.n), 0).label("likes_received"),
            func.coalesce(func.sum(comments.c.n), 0).label("comments_received"),
        )
        .select_from(visible)
        .outerjoin(likes, likes.c.post_id == visible.c.post_id)
        .outerjoin(comments, comments.c.post_id == visible.c.post_id)
        .group_by(visible.c.author_id)
        .subquery()
    )
    posts = func.coalesce(per_author.c.posts_count, 0)
    likes_in = func.coalesce(per_author.c.likes_received, 0)
    comments_in = func.coalesce(per_author.c.comments_received, 0)
    score = (posts + 2 * likes_in + comments_in).label("score")

    rows = (
        db.query(models.User, posts, likes_in, comments_in, score)
        .outerjoin(per_author, per_author.c.author_id == models.User.id)
        .filter(*visible_user_criteria(blocked))
        .order_by(score.desc(), models.User.username)
        .limit(POPULAR_USERS_SIZE)
        .all()
    )
    return [
        schemas.RankedUser(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            posts_count=int(posts_count),
            likes_received=int(likes_received),
            comments_received=int(comments_received),
            score=int(total),
        )
        for user, posts_count, likes_received, comments_received, total in rows
    ]


def build_private_feed(db: Session, viewer: models.User) -> schemas.PrivateFeed:
    """
    Personalized feed for a signed-in, non-suspended viewer.

    Raises:
        ForbiddenError: viewer is suspended
    """
    if viewer.suspended:
        raise ForbiddenError("Your account has been suspended")

    blocked = blocked_user_ids(db, viewer.id)
    followed = subscribed_user_ids(db, viewer.id) - blocked

    pools = [
        ("subscribed", subscribed_pool(db, followed, blocked)),
        ("featured", featured_pool(db, blocked)),
        ("popular", popular_pool(db, followed, blocked)),
    ]
    annotate_posts_with_counts(
        db, [post for _, posts in pools for post in posts], viewer.id, blocked
    )

    feed: list[schemas.FeedPost] = []
    for source, posts in pools:
        for post in posts:
            item = schemas.FeedPost.model_validate(post)
            feed.append(
                item.model_copy(
                    update={"source": source, "is_subscribed_author": post.author_id in followed}
                )
            )

    logger.debug(
        f"Feed for {viewer.id}: "
        + ", ".join(f"{source}={len(posts)}" for source, posts in pools)
    )
    return schemas.PrivateFeed(feed=feed, popular_users=popular_users(db, blocked))


def build_public_feed(db: Session) -> schemas.PublicFeed:
    """Featured posts and the busiest categories. Same for every visitor."""
    featured = featured_pool(db, set(), limit=PUBLIC_FEATURED_SIZE)
    annotate_posts_with_counts(db, featured)

    post_count = func.count(models.Post.id).label("post_count")
    rows = (
        db.query(models.Category, post_count)
        .outerjoin(
            models.Post,
            and_(
                models.Post.category_id == models.Category.id,
                models.Post.published.is_(True),
                models.Post.is_deleted.is_(False),
                models.Post.suspended.is_(False),
            ),
        )
        .group_by(models.Category.id)
        .order_by(post_count.desc(), models.Category.name)
        .limit(PUBLIC_CATEGORIES_SIZE)
        .all()
    )
    categories = [
        schemas.CategoryWithCount(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            color_light=category.color_light,
            color_dark=category.color_dark,
            post_count=count,
        )
        for category, count in rows
    ]
    return schemas.PublicFeed(
        featured=[schemas.PostCard.model_validate(post) for post in featured],
        categories=categories,
    )
