"""Reading (and, rarely, correcting) the admin audit log."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..errors import BadRequestError, NotFoundError

DEFAULT_LIMIT = 50


def _ordered(query, sort: Literal["asc", "desc"]):
    created = models.Log.created_at
    return query.order_by(created.asc() if sort == "asc" else created.desc(), models.Log.id)


def list_logs(
    db: Session,
    skip: int = 0,
    limit: int = DEFAULT_LIMIT,
    sort: Literal["asc", "desc"] = "desc",
    admin_id: UUID | None = None,
    action: models.LogAction | None = None,
) -> list[models.Log]:
    query = db.query(models.Log)
    if admin_id is not None:
        query = query.filter(models.Log.admin_id == admin_id)
    if action is not None:
        query = query.filter(models.Log.action == action.value)
    return _ordered(query, sort).offset(skip).limit(limit).all()


def get_log(db: Session, log_id: UUID) -> models.Log:
    log = db.query(models.Log).filter(models.Log.id == log_id).first()
    if not log:
        raise NotFoundError("Log not found")
    return log


def log_stats(db: Session) -> schemas.LogStats:
    rows = (
        db.query(models.Log.action, func.count(models.Log.id))
        .group_by(models.Log.action)
        .all()
    )
    by_action = {action.value: 0 for action in models.LogAction}
    by_action.update({action: count for action, count in rows})
    return schemas.LogStats(total=sum(by_action.values()), by_action=by_action)


def update_log(db: Session, log_id: UUID, patch: schemas.LogUpdate) -> models.Log:
    """Correct a log entry's description or metadata. The action and actor never change."""
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise BadRequestError("Nothing to update")
    log = get_log(db, log_id)
    if "description" in changes:
        log.description = changes["description"]
    if "meta" in changes:
        log.meta = changes["meta"]
    db.commit()
    db.refresh(log)
    return log
