"""Comment writes. Reading comments happens through the post detail view."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from .. import models
from ..auth import ensure_can_mutate
from ..errors import ForbiddenError, NotFoundError
from .interactions import load_interactable_post


def _get_own_comment(db: Session, author: models.User, comment_id: UUID) -> models.Comment:
    comment = db.query(models.Comment).filter(models.Comment.id == comment_id).first()
    if comment is None or comment.is_deleted:
        raise NotFoundError("Comment not found")
    if comment.author_id != author.id:
        raise ForbiddenError("You do not have permission to modify this comment")
    return comment


def create_comment(db: Session, author: models.User, post_id: UUID, content: str) -> models.Comment:
    """
    Raises:
        NotFoundError: the post is missing or not visible to the author
        ForbiddenError: suspended author, or a block between author and post author
    """
    ensure_can_mutate(author)
    post = load_interactable_post(db, author, post_id)
    comment = models.Comment(content=content.strip(), author_id=author.id, post_id=post.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def update_comment(db: Session, author: models.User, comment_id: UUID, content: str) -> models.Comment:
    ensure_can_mutate(author)
    comment = _get_own_comment(db, author, comment_id)
    comment.content = content.strip()
    comment.is_edited = True
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, author: models.User, comment_id: UUID) -> None:
    """Soft delete: the comment disappears from every view but the row stays for reports."""
    ensure_can_mutate(author)
    comment = _get_own_comment(db, author, comment_id)
    comment.is_deleted = True
    db.commit()
