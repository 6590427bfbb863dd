"""
Admin moderation actions.

Every state change here writes exactly one Log entry in the same commit as the
change itself. Repeating an action on something already in the target state is
rejected so the log never records a no-op.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from .. import models
from ..errors import BadRequestError, NotFoundError
from ..utils.audit import log_admin_action


def _get_user(db: Session, user_id: UUID) -> models.User:
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def _get_post(db: Session, post_id: UUID) -> models.Post:
    post = db.query(models.Post).filter(models.Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return post


def _meta(reason: str | None, **ids) -> dict:
    meta = {key: str(value) for key, value in ids.items()}
    if reason:
        meta["reason"] = reason
    return meta


def suspend_user(db: Session, admin: models.Admin, user_id: UUID, reason: str | None = None) -> models.User:
    user = _get_user(db, user_id)
    if user.suspended:
        raise BadRequestError("User is already suspended")
    user.suspended = True
    log_admin_action(
        db, admin, models.LogAction.SUSPEND_USER,
        f"Suspended user {user.username}",
        _meta(reason, userId=user.id, username=user.username),
    )
    db.commit()
    db.refresh(user)
    return user


def unsuspend_user(db: Session, admin: models.Admin, user_id: UUID, reason: str | None = None) -> models.User:
    user = _get_user(db, user_id)
    if not user.suspended:
        raise BadRequestError("User is not suspended")
    user.suspended = False
    log_admin_action(
        db, admin, models.LogAction.ACTIVATE_USER,
        f"Reactivated user {user.username}",
        _meta(reason, userId=user.id, username=user.username),
    )
    db.commit()
    db.refresh(user)
    return user


def suspend_post(db: Session, admin: models.Admin, post_id: UUID, reason: str | None = None) -> models.Post:
    """Suspending also unpublishes; the author cannot republish until it is lifted."""
    post = _get_post(db, post_id)
    if post.suspended:
        raise BadRequestError("Post is already suspended")
    post.suspended = True
    post.published = False
    log_admin_action(
        db, admin, models.LogAction.SUSPEND_POST,
        f"Suspended post \"{post.title}\"",
        _meta(reason, postId=post.id, authorId=post.author_id),
    )
    db.commit()
    db.refresh(post)
    return post


def unsuspend_post(db: Session, admin: models.Admin, post_id: UUID, reason: str | None = None) -> models.Post:
    post = _get_post(db, post_id)
    if not post.suspended:
        raise BadRequestError("Post is not suspended")
    post.suspended = False
    log_admin_action(
        db, admin, models.LogAction.RESTORE_POST,
        f"Lifted suspension of post \"{post.title}\"",
        _meta(reason, postId=post.id, authorId=post.author_id),
    )
    db.commit()
    db.refresh(post)
    return post


def toggle_featured(db: Session, admin: models.Admin, post_id: UUID, reason: str | None = None) -> models.Post:
    post = _get_post(db, post_id)
    if post.is_deleted:
        raise NotFoundError("Post not found")
    post.is_featured = not post.is_featured
    log_admin_action(
        db, admin, models.LogAction.FEATURE_POST,
        f"{'Featured' if post.is_featured else 'Unfeatured'} post \"{post.title}\"",
        _meta(reason, postId=post.id, featured=post.is_featured),
    )
    db.commit()
    db.refresh(post)
    return post


def delete_comment(db: Session, admin: models.Admin, comment_id: UUID, reason: str | None = None) -> None:
    """Remove a comment for good, with its likes."""
    comment = db.query(models.Comment).filter(models.Comment.id == comment_id).first()
    if not comment:
        raise NotFoundError("Comment not found")
    log_admin_action(
        db, admin, models.LogAction.DELETE_COMMENT,
        f"Deleted comment {comment.id}",
        _meta(reason, commentId=comment.id, postId=comment.post_id, authorId=comment.author_id)
        | {"content": comment.content},
    )
    db.delete(comment)
    db.commit()
