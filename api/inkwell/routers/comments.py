"""Comment endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db
from ..services import comments as comment_service
from ..services.interactions import toggle_comment_like

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.post("", response_model=schemas.CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: schemas.CommentCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Comment:
    return comment_service.create_comment(db, current_user, payload.post_id, payload.content)


@router.patch("/{comment_id}", response_model=schemas.CommentOut)
def update_comment(
    comment_id: UUID,
    payload: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Comment:
    return comment_service.update_comment(db, current_user, comment_id, payload.content)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> None:
    comment_service.delete_comment(db, current_user, comment_id)


@router.post("/{comment_id}/like", response_model=schemas.LikeState)
def like_comment(
    comment_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.LikeState:
    """Toggle: likes the comment, or removes the like if already liked."""
    return toggle_comment_like(db, current_user, comment_id)
