"""
Toggle operations: post likes, comment likes, subscriptions and blocks.

Each toggle is check-then-act against a unique constraint. When two identical
requests race, the loser's insert hits the constraint; that is treated as the
toggle already being on rather than as an error.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import ensure_can_mutate
from ..errors import ForbiddenError, NotFoundError
from ..utils.visibility import is_visible
from .post_detail import has_content
from .relationships import block_exists, count_subscribers

logger = logging.getLogger(__name__)


def _insert_or_already_on(db: Session, row) -> None:
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Concurrent duplicate {type(row).__name__}; treating as already on")


def load_interactable_post(db: Session, actor: models.User, post_id: UUID) -> models.Post:
    """
    A post the actor may like or comment on.

    Raises:
        NotFoundError: missing or not visible to the actor
        ForbiddenError: the actor and the author have blocked each other
    """
    post = db.query(models.Post).filter(models.Post.id == post_id).first()
    if post is None or not is_visible(actor.id, "post", post) or not has_content(post.content):
        raise NotFoundError("Post not found")
    if post.author_id != actor.id and block_exists(db, actor.id, post.author_id):
        raise ForbiddenError("You cannot interact with this post")
    return post


def toggle_post_like(db: Session, actor: models.User, post_id: UUID) -> schemas.LikeState:
    ensure_can_mutate(actor)
    post = load_interactable_post(db, actor, post_id)

    existing = (
        db.query(models.PostLike)
        .filter(models.PostLike.user_id == actor.id, models.PostLike.post_id == post.id)
        .first()
    )
    if existing:
        db.delete(existing)
        db.commit()
        liked = False
    else:
        _insert_or_already_on(db, models.PostLike(user_id=actor.id, post_id=post.id))
        liked = True

    like_count = (
        db.query(func.count(models.PostLike.id)).filter(models.PostLike.post_id == post_id).scalar()
    )
    return schemas.LikeState(liked=liked, like_count=like_count or 0)


def toggle_comment_like(db: Session, actor: models.User, comment_id: UUID) -> schemas.LikeState:
    ensure_can_mutate(actor)
    comment = db.query(models.Comment).filter(models.Comment.id == comment_id).first()
    if comment is None or not is_visible(actor.id, "comment", comment):
        raise NotFoundError("Comment not found")
    load_interactable_post(db, actor, comment.post_id)
    if comment.author_id != actor.id and block_exists(db, actor.id, comment.author_id):
        raise ForbiddenError("You cannot interact with this comment")

    existing = (
        db.query(models.CommentLike)
        .filter(models.CommentLike.user_id == actor.id, models.CommentLike.comment_id == comment.id)
        .first()
    )
    if existing:
        db.delete(existing)
        db.commit()
        liked = False
    else:
        _insert_or_already_on(db, models.CommentLike(user_id=actor.id, comment_id=comment.id))
        liked = True

    like_count = (
        db.query(func.count(models.CommentLike.id))
        .filter(models.CommentLike.comment_id == comment_id)
        .scalar()
    )
    return schemas.LikeState(liked=liked, like_count=like_count or 0)


def _load_target_user(db: Session, user_id: UUID) -> models.User:
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if user is None or not is_visible(None, "user", user):
        raise NotFoundError("User not found")
    return user


def toggle_subscription(db: Session, actor: models.User, target_id: UUID) -> schemas.SubscriptionState:
    """Follow or unfollow another user."""
    ensure_can_mutate(actor)
    if target_id == actor.id:
        raise ForbiddenError("You cannot subscribe to yourself")
    target = _load_target_user(db, target_id)
    if block_exists(db, actor.id, target.id):
        raise ForbiddenError("You cannot subscribe to this user")

    existing = (
        db.query(models.Subscription)
        .filter(
            models.Subscription.subscriber_id == actor.id,
            models.Subscription.subscribed_id == target.id,
        )
        .first()
    )
    if existing:
        db.delete(existing)
        db.commit()
        subscribed = False
    else:
        _insert_or_already_on(
            db, models.Subscription(subscriber_id=actor.id, subscribed_id=target.id)
        )
        subscribed = True
    return schemas.SubscriptionState(subscribed=subscribed, subscribers=count_subscribers(db, target_id))


def toggle_block(db: Session, actor: models.User, target_id: UUID) -> schemas.BlockState:
    """
    Block or unblock another user.

    Blocking also removes subscriptions between the two users in both directions.
    """
    ensure_can_mutate(actor)
    if target_id == actor.id:
        raise ForbiddenError("You cannot block yourself")
    target = db.query(models.User).filter(models.User.id == target_id).first()
    if target is None:
        raise NotFoundError("User not found")

    existing = (
        db.query(models.Block)
        .filter(models.Block.blocker_id == actor.id, models.Block.blocked_id == target.id)
        .first()
    )
    if existing:
        db.delete(existing)
        db.commit()
        return schemas.BlockState(blocked=False)

    Subscription = models.Subscription
    db.query(Subscription).filter(
        or_(
            and_(Subscription.subscriber_id == actor.id, Subscription.subscribed_id == target.id),
            and_(Subscription.subscriber_id == target.id, Subscription.subscribed_id == actor.id),
        )
    ).delete(synchronize_session=False)
    _insert_or_already_on(db, models.Block(blocker_id=actor.id, blocked_id=target.id))
    logger.info(f"User {actor.id} blocked {target.id}")
    return schemas.BlockState(blocked=True)


def list_blocked_users(db: Session, actor: models.User) -> list[models.User]:
    """Users the actor has blocked (not those who blocked the actor)."""
    return (
        db.query(models.User)
        .join(models.Block, models.Block.blocked_id == models.User.id)
        .filter(models.Block.blocker_id == actor.id)
        .order_by(models.Block.created_at.desc())
        .all()
    )
