"""Audit logging utility for admin actions."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from .. import models

logger = logging.getLogger(__name__)


def log_admin_action(
    db: Session,
    admin: models.Admin,
    action: models.LogAction,
    description: str,
    meta: dict[str, Any] | None = None,
) -> models.Log:
    """
    Record an admin action in the audit log.

    The entry is added to the caller's transaction and is written by the
    caller's commit, together with the state change it describes.

    Args:
        db: Database session
        admin: Admin performing the action
        action: What was done
        description: Human-readable summary (e.g. "Suspended user johndoe123")
        meta: Structured context such as target ids and the reason given

    Returns:
        The pending Log entry
    """
    entry = models.Log(
        admin_id=admin.id,
        action=action.value,
        description=description,
        meta=meta or {},
    )
    db.add(entry)
    logger.info(f"Admin {admin.username} {action.value}: {description}")
    return entry
