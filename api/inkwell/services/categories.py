"""Category management. Anyone can list categories; only admins change them."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..errors import BadRequestError, ConflictError, NotFoundError
from ..utils.audit import log_admin_action
from ..utils.slugs import slugify


def list_categories(db: Session) -> list[models.Category]:
    return db.query(models.Category).order_by(models.Category.name).all()


def get_category(db: Session, category_id: UUID) -> models.Category:
    category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def _ensure_name_free(db: Session, name: str, exclude_id: UUID | None = None) -> None:
    query = db.query(models.Category.id).filter(
        (func.lower(models.Category.name) == name.lower()) | (models.Category.slug == slugify(name))
    )
    if exclude_id is not None:
        query = query.filter(models.Category.id != exclude_id)
    if query.first():
        raise ConflictError("Category already exists")


def create_category(db: Session, admin: models.Admin, data: schemas.CategoryCreate) -> models.Category:
    name = data.name.strip()
    _ensure_name_free(db, name)
    category = models.Category(
        name=name,
        slug=slugify(name),
        description=data.description,
        color_light=data.color_light,
        color_dark=data.color_dark,
    )
    db.add(category)
    db.flush()
    log_admin_action(
        db, admin, models.LogAction.CREATE_CATEGORY,
        f"Created category {name}",
        {"categoryId": str(category.id), "name": name},
    )
    db.commit()
    db.refresh(category)
    return category


def update_category(
    db: Session, admin: models.Admin, category_id: UUID, patch: schemas.CategoryUpdate
) -> models.Category:
    category = get_category(db, category_id)
    changes = patch.model_dump(exclude_unset=True)

    if changes.get("name"):
        name = changes["name"].strip()
        _ensure_name_free(db, name, exclude_id=category.id)
        category.name = name
        category.slug = slugify(name)
    for field in ("description", "color_light", "color_dark"):
        if field in changes:
            setattr(category, field, changes[field])

    log_admin_action(
        db, admin, models.LogAction.OTHER,
        f"Updated category {category.name}",
        {"categoryId": str(category.id), "fields": sorted(changes)},
    )
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, admin: models.Admin, category_id: UUID) -> None:
    """
    Raises:
        BadRequestError: posts are still filed under the category
    """
    category = get_category(db, category_id)
    in_use = db.query(models.Post.id).filter(models.Post.category_id == category.id).first()
    if in_use:
        raise BadRequestError("Category still has posts")

    log_admin_action(
        db, admin, models.LogAction.DELETE_CATEGORY,
        f"Deleted category {category.name}",
        {"categoryId": str(category.id), "name": category.name},
    )
    db.delete(category)
    db.commit()
