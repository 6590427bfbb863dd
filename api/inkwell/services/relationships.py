"""
Block and subscription lookups.

Always read fresh from the database; block decisions gate access, so nothing
here is cached between requests.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from .. import models


def block_exists(db: Session, a: UUID, b: UUID) -> bool:
    """True if a blocked b or b blocked a."""
    Block = models.Block
    row = (
        db.query(Block.id)
        .filter(
            or_(
                and_(Block.blocker_id == a, Block.blocked_id == b),
                and_(Block.blocker_id == b, Block.blocked_id == a),
            )
        )
        .first()
    )
    return row is not None


def blocked_user_ids(db: Session, user_id: UUID | None) -> set[UUID]:
    """Every user on either side of a block with user_id."""
    if user_id is None:
        return set()
    Block = models.Block
    rows = (
        db.query(Block.blocker_id, Block.blocked_id)
        .filter(or_(Block.blocker_id == user_id, Block.blocked_id == user_id))
        .all()
    )
    ids: set[UUID] = set()
    for blocker_id, blocked_id in rows:
        ids.add(blocked_id if blocker_id == user_id else blocker_id)
    return ids


def is_subscribed(db: Session, subscriber_id: UUID | None, subscribed_id: UUID) -> bool:
    if subscriber_id is None:
        return False
    row = (
        db.query(models.Subscription.id)
        .filter(
            models.Subscription.subscriber_id == subscriber_id,
            models.Subscription.subscribed_id == subscribed_id,
        )
        .first()
    )
    return row is not None


def subscribed_user_ids(db: Session, subscriber_id: UUID) -> set[UUID]:
    """Users that subscriber_id follows."""
    rows = (
        db.query(models.Subscription.subscribed_id)
        .filter(models.Subscription.subscriber_id == subscriber_id)
        .all()
    )
    return {row[0] for row in rows}


def count_subscribers(db: Session, user_id: UUID) -> int:
    return (
        db.query(func.count(models.Subscription.id))
        .filter(models.Subscription.subscribed_id == user_id)
        .scalar()
        or 0
    )


def count_subscribing(db: Session, user_id: UUID) -> int:
    return (
        db.query(func.count(models.Subscription.id))
        .filter(models.Subscription.subscriber_id == user_id)
        .scalar()
        or 0
    )
