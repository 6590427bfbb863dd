"""Post endpoints: authoring for the signed-in author, reading for everyone."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, get_current_user_optional
from ..deps import get_db
from ..services import post_detail
from ..services import posts as post_service

router = APIRouter(prefix="/posts", tags=["Posts"])


# ============================================================================
# READING
# ============================================================================


@router.get("/by-slug/{slug}", response_model=schemas.PostDetail)
def get_post(
    slug: str,
    db: Session = Depends(get_db),
    current_user: models.User | None = Depends(get_current_user_optional),
) -> schemas.PostDetail:
    """
    Post with its comments.

    Does not count a view; call POST /posts/by-slug/{slug}/views for that.
    """
    return post_detail.get_post_detail(db, slug, current_user.id if current_user else None)


@router.get("/by-slug/{slug}/preview", response_model=schemas.PostDetail)
def preview_post(
    slug: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.PostDetail:
    """Author-only view, available before publishing."""
    return post_detail.get_post_for_author_view(db, slug, current_user.id)


@router.post("/by-slug/{slug}/views", response_model=schemas.ViewCount)
def count_view(
    slug: str,
    db: Session = Depends(get_db),
    current_user: models.User | None = Depends(get_current_user_optional),
) -> schemas.ViewCount:
    views = post_detail.increment_view(db, slug, current_user.id if current_user else None)
    return schemas.ViewCount(views=views)


# ============================================================================
# AUTHORING
# ============================================================================


@router.post("", response_model=schemas.PostEditView, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: schemas.PostCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Post:
    """Create an unpublished draft. Content is saved separately."""
    return post_service.create_post(db, current_user, payload)


@router.get("/mine", response_model=list[schemas.AuthorPost])
def list_my_posts(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[models.Post]:
    return post_service.list_author_posts(db, current_user)


@router.post("/images", response_model=schemas.ImageUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_image(
    payload: schemas.ImageUpload,
    current_user: models.User = Depends(get_current_user),
) -> schemas.ImageUploadResponse:
    stored = post_service.upload_post_image(current_user, payload.image)
    return schemas.ImageUploadResponse(url=stored.url, path=stored.path)


@router.get("/{post_id}/edit", response_model=schemas.PostEditView)
def get_post_for_editing(
    post_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Post:
    return post_service.get_post_for_editing(db, current_user, post_id)


@router.patch("/{post_id}", response_model=schemas.PostEditView)
def update_post(
    post_id: UUID,
    payload: schemas.PostUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Post:
    return post_service.update_post_details(db, current_user, post_id, payload)


@router.delete("/{post_id}/cover", response_model=schemas.PostEditView)
def remove_cover(
    post_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Post:
    return post_service.remove_cover_image(db, current_user, post_id)


@router.put("/{post_id}/content", response_model=schemas.PostEditView)
def save_content(
    post_id: UUID,
    payload: schemas.EditorDocument,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Post:
    """Replace the post's content. Read time is recalculated."""
    return post_service.update_content(db, current_user, post_id, payload)


@router.post("/{post_id}/publish", response_model=schemas.PostEditView)
def toggle_publish(
    post_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Post:
    return post_service.toggle_publish(db, current_user, post_id)


@router.post("/{post_id}/trash", response_model=schemas.PostEditView)
def toggle_trash(
    post_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Post:
    return post_service.toggle_trash(db, current_user, post_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> None:
    """Delete a trashed post for good."""
    post_service.delete_post_permanently(db, current_user, post_id)
