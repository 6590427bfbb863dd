"""Reporting users, posts and comments."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db
from ..services.reports import create_report

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("", response_model=schemas.ReportOut, status_code=status.HTTP_201_CREATED)
def report(
    payload: schemas.ReportCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Report:
    """Report a user, a post or a comment. At least one target is required."""
    return create_report(db, current_user, payload)
