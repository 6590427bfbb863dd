"""Likes, subscriptions and blocks. Every POST here is a toggle."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db
from ..services import interactions

router = APIRouter(prefix="", tags=["Social"])


@router.post("/posts/{post_id}/like", response_model=schemas.LikeState)
def like_post(
    post_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.LikeState:
    return interactions.toggle_post_like(db, current_user, post_id)


@router.post("/users/{user_id}/subscription", response_model=schemas.SubscriptionState)
def subscribe(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.SubscriptionState:
    return interactions.toggle_subscription(db, current_user, user_id)


@router.post("/users/{user_id}/block", response_model=schemas.BlockState)
def block(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.BlockState:
    """Toggle a block. Blocking drops subscriptions between the two users."""
    return interactions.toggle_block(db, current_user, user_id)


@router.get("/users/me/blocks", response_model=list[schemas.AuthorSummary])
def list_blocks(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[models.User]:
    return interactions.list_blocked_users(db, current_user)
