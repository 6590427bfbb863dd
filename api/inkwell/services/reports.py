"""User reports and their review by admins."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import ensure_can_mutate
from ..deps import PageParams
from ..errors import BadRequestError, ForbiddenError, NotFoundError
from ..pagination import paginate
from ..utils.audit import log_admin_action
from .relationships import block_exists

logger = logging.getLogger(__name__)


def create_report(db: Session, reporter: models.User, data: schemas.ReportCreate) -> models.Report:
    """
    File a report against a user, a post, a comment, or any combination.

    Raises:
        ForbiddenError: suspended reporter, reporting yourself or your own
            content, or a block between reporter and the reported owner
        BadRequestError: no target given
        NotFoundError: a target does not exist
    """
    ensure_can_mutate(reporter)
    if not (data.reported_user_id or data.post_id or data.comment_id):
        raise BadRequestError("A report must target a user, a post or a comment")
    if data.reported_user_id == reporter.id:
        raise ForbiddenError("You cannot report yourself")

    owner_ids: set[UUID] = set()
    if data.reported_user_id:
        user = db.query(models.User).filter(models.User.id == data.reported_user_id).first()
        if not user:
            raise NotFoundError("User not found")
        owner_ids.add(user.id)
    if data.post_id:
        post = db.query(models.Post).filter(models.Post.id == data.post_id).first()
        if not post or post.is_deleted:
            raise NotFoundError("Post not found")
        owner_ids.add(post.author_id)
    if data.comment_id:
        comment = db.query(models.Comment).filter(models.Comment.id == data.comment_id).first()
        if not comment or comment.is_deleted:
            raise NotFoundError("Comment not found")
        owner_ids.add(comment.author_id)

    if reporter.id in owner_ids:
        raise ForbiddenError("You cannot report your own content")
    if any(block_exists(db, reporter.id, owner_id) for owner_id in owner_ids):
        raise ForbiddenError("You cannot report this user")

    report = models.Report(
        reporter_id=reporter.id,
        reported_user_id=data.reported_user_id,
        post_id=data.post_id,
        comment_id=data.comment_id,
        reason=data.reason.value,
        message=data.message,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(f"Report {report.id} filed by {reporter.id} ({report.reason})")
    return report


def list_reports(
    db: Session,
    params: PageParams,
    status: models.ReportStatus | None = None,
    reason: models.ReportReason | None = None,
) -> schemas.Page[schemas.ReportOut]:
    query = db.query(models.Report)
    if status is not None:
        query = query.filter(models.Report.status == status.value)
    if reason is not None:
        query = query.filter(models.Report.reason == reason.value)
    items, pagination = paginate(query.order_by(models.Report.created_at.desc()), params)
    return schemas.Page[schemas.ReportOut](
        items=[schemas.ReportOut.model_validate(report) for report in items],
        pagination=pagination,
    )


def update_report_status(
    db: Session, admin: models.Admin, report_id: UUID, status: models.ReportStatus
) -> models.Report:
    report = db.query(models.Report).filter(models.Report.id == report_id).first()
    if not report:
        raise NotFoundError("Report not found")

    previous = report.status
    report.status = status.value
    log_admin_action(
        db,
        admin,
        models.LogAction.UPDATE_REPORT,
        f"Marked report {report.id} as {status.value}",
        {"reportId": str(report.id), "from": previous, "to": status.value},
    )
    db.commit()
    db.refresh(report)
    return report
