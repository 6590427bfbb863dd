"""Paginated listings for the admin dashboard. Admins see everything, hidden or not."""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..deps import PageParams
from ..pagination import paginate


def list_users(db: Session, params: PageParams, q: str | None = None) -> schemas.Page[schemas.AdminUserRow]:
    query = db.query(models.User).outerjoin(models.Profile).options(joinedload(models.User.profile))
    q = (q or "").strip()
    if q:
        query = query.filter(
            or_(
                models.User.username.icontains(q, autoescape=True),
                models.User.email.icontains(q, autoescape=True),
                models.Profile.display_name.icontains(q, autoescape=True),
            )
        )
    users, pagination = paginate(query.order_by(models.User.created_at.desc(), models.User.id), params)
    return schemas.Page[schemas.AdminUserRow](
        items=[schemas.AdminUserRow.model_validate(user) for user in users],
        pagination=pagination,
    )


def list_posts(db: Session, params: PageParams, q: str | None = None) -> schemas.Page[schemas.AdminPostRow]:
    query = db.query(models.Post).options(
        joinedload(models.Post.author).joinedload(models.User.profile)
    )
    q = (q or "").strip()
    if q:
        query = query.filter(
            or_(
                models.Post.title.icontains(q, autoescape=True),
                models.Post.author.has(models.User.username.icontains(q, autoescape=True)),
            )
        )
    posts, pagination = paginate(query.order_by(models.Post.created_at.desc(), models.Post.id), params)
    return schemas.Page[schemas.AdminPostRow](
        items=[schemas.AdminPostRow.model_validate(post) for post in posts],
        pagination=pagination,
    )
