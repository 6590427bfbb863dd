"""Admin audit log endpoints."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_admin, require_super_admin
from ..deps import get_db
from ..services import logs as log_service

router = APIRouter(prefix="/admin/logs", tags=["Logs"])

Sort = Literal["asc", "desc"]


@router.get("", response_model=list[schemas.LogOut])
def list_logs(
    skip: int = Query(0, ge=0),
    limit: int = Query(log_service.DEFAULT_LIMIT, ge=1, le=200),
    sort: Sort = Query("desc"),
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> list[models.Log]:
    return log_service.list_logs(db, skip, limit, sort)


@router.get("/stats", response_model=schemas.LogStats)
def stats(
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> schemas.LogStats:
    return log_service.log_stats(db)


@router.get("/mine", response_model=list[schemas.LogOut])
def my_logs(
    skip: int = Query(0, ge=0),
    limit: int = Query(log_service.DEFAULT_LIMIT, ge=1, le=200),
    sort: Sort = Query("desc"),
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> list[models.Log]:
    return log_service.list_logs(db, skip, limit, sort, admin_id=admin.id)


@router.get("/actions/{action}", response_model=list[schemas.LogOut])
def logs_by_action(
    action: models.LogAction,
    skip: int = Query(0, ge=0),
    limit: int = Query(log_service.DEFAULT_LIMIT, ge=1, le=200),
    sort: Sort = Query("desc"),
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> list[models.Log]:
    return log_service.list_logs(db, skip, limit, sort, action=action)


@router.get("/admins/{admin_id}", response_model=list[schemas.LogOut])
def logs_by_admin(
    admin_id: UUID,
    skip: int = Query(0, ge=0),
    limit: int = Query(log_service.DEFAULT_LIMIT, ge=1, le=200),
    sort: Sort = Query("desc"),
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> list[models.Log]:
    return log_service.list_logs(db, skip, limit, sort, admin_id=admin_id)


@router.get("/{log_id}", response_model=schemas.LogOut)
def get_log(
    log_id: UUID,
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> models.Log:
    return log_service.get_log(db, log_id)


@router.patch("/{log_id}", response_model=schemas.LogOut)
def update_log(
    log_id: UUID,
    payload: schemas.LogUpdate,
    db: Session = Depends(get_db),
    _: models.Admin = Depends(require_super_admin),
) -> models.Log:
    """Correct a log entry. Super admins only."""
    return log_service.update_log(db, log_id, payload)
