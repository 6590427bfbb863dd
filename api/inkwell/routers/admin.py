"""Admin dashboard listings and moderation endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_admin
from ..deps import PageParams, get_db, get_page_params
from ..services import admin_fetch, moderation
from ..services.reports import list_reports, update_report_status

router = APIRouter(prefix="/admin", tags=["Admin"])


def _reason(payload: schemas.ModerationRequest | None) -> str | None:
    return payload.reason if payload else None


@router.get("/users", response_model=schemas.Page[schemas.AdminUserRow])
def list_users(
    q: str | None = Query(None, max_length=100),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> schemas.Page[schemas.AdminUserRow]:
    return admin_fetch.list_users(db, params, q)


@router.get("/posts", response_model=schemas.Page[schemas.AdminPostRow])
def list_posts(
    q: str | None = Query(None, max_length=100),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> schemas.Page[schemas.AdminPostRow]:
    """All posts, including drafts, trashed and suspended ones."""
    return admin_fetch.list_posts(db, params, q)


@router.get("/reports", response_model=schemas.Page[schemas.ReportOut])
def get_reports(
    report_status: models.ReportStatus | None = Query(None, alias="status"),
    reason: models.ReportReason | None = Query(None),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> schemas.Page[schemas.ReportOut]:
    return list_reports(db, params, report_status, reason)


@router.patch("/reports/{report_id}", response_model=schemas.ReportOut)
def patch_report(
    report_id: UUID,
    payload: schemas.ReportStatusUpdate,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Report:
    return update_report_status(db, admin, report_id, payload.status)


@router.post("/users/{user_id}/suspend", response_model=schemas.AdminUserRow)
def suspend_user(
    user_id: UUID,
    payload: schemas.ModerationRequest | None = None,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.User:
    """
    Suspend a user.

    A suspended user's posts, comments and profile disappear from every feed
    and listing, and the account can no longer mutate anything.
    """
    return moderation.suspend_user(db, admin, user_id, _reason(payload))


@router.post("/users/{user_id}/unsuspend", response_model=schemas.AdminUserRow)
def unsuspend_user(
    user_id: UUID,
    payload: schemas.ModerationRequest | None = None,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.User:
    return moderation.unsuspend_user(db, admin, user_id, _reason(payload))


@router.post("/posts/{post_id}/suspend", response_model=schemas.AdminPostRow)
def suspend_post(
    post_id: UUID,
    payload: schemas.ModerationRequest | None = None,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Post:
    return moderation.suspend_post(db, admin, post_id, _reason(payload))


@router.post("/posts/{post_id}/unsuspend", response_model=schemas.AdminPostRow)
def unsuspend_post(
    post_id: UUID,
    payload: schemas.ModerationRequest | None = None,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Post:
    return moderation.unsuspend_post(db, admin, post_id, _reason(payload))


@router.post("/posts/{post_id}/feature", response_model=schemas.AdminPostRow)
def feature_post(
    post_id: UUID,
    payload: schemas.ModerationRequest | None = None,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Post:
    """Toggle the featured flag."""
    return moderation.toggle_featured(db, admin, post_id, _reason(payload))


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: UUID,
    payload: schemas.ModerationRequest | None = None,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> None:
    moderation.delete_comment(db, admin, comment_id, _reason(payload))
