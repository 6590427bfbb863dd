"""Public profile view."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..errors import NotFoundError
from ..utils.usernames import normalize_username
from .post_stats import annotate_posts_with_counts, card_load_options
from .relationships import block_exists, blocked_user_ids, count_subscribers, count_subscribing, is_subscribed

LATEST_POSTS_SIZE = 5


def _published_posts(db: Session, author_id: UUID):
    return db.query(models.Post).filter(
        models.Post.author_id == author_id,
        models.Post.published.is_(True),
        models.Post.is_deleted.is_(False),
        models.Post.suspended.is_(False),
    )


def get_public_profile(db: Session, username: str, viewer_id: UUID | None = None) -> schemas.PublicProfile:
    """
    Profile of a user by username (any case).

    When the viewer and the target have blocked each other in either direction
    the profile still resolves and shows its stats, but latestPosts is empty.

    Raises:
        NotFoundError: no such user, or the account is inactive or suspended
    """
    user = (
        db.query(models.User)
        .options(joinedload(models.User.profile))
        .filter(models.User.username == normalize_username(username))
        .first()
    )
    if not user or not user.is_active or user.suspended:
        raise NotFoundError("User not found")

    is_me = viewer_id is not None and viewer_id == user.id
    is_blocked = viewer_id is not None and not is_me and block_exists(db, viewer_id, user.id)
    is_following = viewer_id is not None and not is_me and is_subscribed(db, viewer_id, user.id)

    post_count = (
        _published_posts(db, user.id).with_entities(func.count(models.Post.id)).scalar() or 0
    )

    latest_posts: list[schemas.PostCard] = []
    if not is_blocked:
        posts = (
            _published_posts(db, user.id)
            .options(*card_load_options())
            .filter(models.Post.content.is_not(None))
            .order_by(models.Post.published_at.desc(), models.Post.created_at.desc())
            .limit(LATEST_POSTS_SIZE)
            .all()
        )
        annotate_posts_with_counts(db, posts, viewer_id, blocked_user_ids(db, viewer_id))
        latest_posts = [schemas.PostCard.model_validate(post) for post in posts]

    profile = user.profile
    return schemas.PublicProfile(
        id=user.id,
        username=user.username,
        display_name=profile.display_name,
        avatar_url=profile.avatar_url,
        cover_url=profile.cover_url,
        bio=profile.bio,
        nationality=profile.nationality,
        socials=profile.socials or [],
        created_at=user.created_at,
        is_blocked=is_blocked,
        is_following=is_following,
        is_me=is_me,
        stats=schemas.ProfileStats(
            posts=post_count,
            subscribers=count_subscribers(db, user.id),
            subscribing=count_subscribing(db, user.id),
        ),
        latest_posts=latest_posts,
    )
