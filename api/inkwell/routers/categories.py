"""Categories: public listing, admin management."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_admin
from ..deps import get_db
from ..services import categories as category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[schemas.CategoryOut])
def list_categories(db: Session = Depends(get_db)) -> list[models.Category]:
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=schemas.CategoryOut)
def get_category(category_id: UUID, db: Session = Depends(get_db)) -> models.Category:
    return category_service.get_category(db, category_id)


@router.post("", response_model=schemas.CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Category:
    return category_service.create_category(db, admin, payload)


@router.patch("/{category_id}", response_model=schemas.CategoryOut)
def update_category(
    category_id: UUID,
    payload: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Category:
    return category_service.update_category(db, admin, category_id, payload)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> None:
    category_service.delete_category(db, admin, category_id)
