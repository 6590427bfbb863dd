"""Username normalization and availability checks."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from .. import models


def normalize_username(username: str) -> str:
    """Usernames are case-insensitive; they are stored and looked up lower-case."""
    return username.strip().lower()


def is_username_taken(db: Session, username: str, exclude_user_id: UUID | None = None) -> bool:
    """
    Check if a username belongs to another user.

    Args:
        db: Database session
        username: Username to check (any case)
        exclude_user_id: The user asking, whose own username never counts as taken
    """
    query = db.query(models.User.id).filter(models.User.username == normalize_username(username))
    if exclude_user_id is not None:
        query = query.filter(models.User.id != exclude_user_id)
    return query.first() is not None


def is_email_taken(db: Session, email: str, exclude_user_id: UUID | None = None) -> bool:
    query = db.query(models.User.id).filter(models.User.email == email.strip().lower())
    if exclude_user_id is not None:
        query = query.filter(models.User.id != exclude_user_id)
    return query.first() is not None
