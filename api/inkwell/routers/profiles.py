"""Public profile pages."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user_optional
from ..deps import get_db
from ..services.profiles import get_public_profile

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/{username}", response_model=schemas.PublicProfile)
def get_profile(
    username: str,
    db: Session = Depends(get_db),
    current_user: models.User | None = Depends(get_current_user_optional),
) -> schemas.PublicProfile:
    """
    Public profile by username.

    Signed-in viewers also get isFollowing, isBlocked and isMe. A blocked
    relationship in either direction hides latestPosts.
    """
    return get_public_profile(db, username, current_user.id if current_user else None)
