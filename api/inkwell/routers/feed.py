"""Feeds and search."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, get_current_user_optional
from ..deps import get_db
from ..services.explore import explore
from ..services.feed import build_private_feed, build_public_feed

router = APIRouter(prefix="", tags=["Feed"])


@router.get("/feed", response_model=schemas.PrivateFeed)
def private_feed(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.PrivateFeed:
    """
    Personalized feed: subscribed, then featured, then popular posts, plus the
    most popular users. Each post carries the pool it came from in `source`.
    """
    return build_private_feed(db, current_user)


@router.get("/feed/public", response_model=schemas.PublicFeed)
def public_feed(db: Session = Depends(get_db)) -> schemas.PublicFeed:
    return build_public_feed(db)


@router.get("/explore", response_model=schemas.ExploreResult)
def explore_content(
    q: str = Query("", max_length=100),
    sort: str = Query("latest", description="latest, popular or trending"),
    db: Session = Depends(get_db),
    current_user: models.User | None = Depends(get_current_user_optional),
) -> schemas.ExploreResult:
    return explore(db, q, sort, current_user.id if current_user else None)
