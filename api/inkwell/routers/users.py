"""Self-service account endpoints for the signed-in user."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db
from ..services import users as user_service

router = APIRouter(prefix="/users/me", tags=["Users"])


@router.put("/email", response_model=schemas.UserAccount)
def update_email(
    payload: schemas.EmailUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    return user_service.update_email(db, current_user, payload.email)


@router.put("/username", response_model=schemas.UserAccount)
def update_username(
    payload: schemas.UsernameUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    return user_service.update_username(db, current_user, payload.username)


@router.patch("/profile", response_model=schemas.UserAccount)
def update_profile(
    payload: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    """Update display name, bio, nationality and social links. Omitted fields are left alone."""
    return user_service.update_profile(db, current_user, payload)


@router.put("/avatar", response_model=schemas.UserAccount)
def update_avatar(
    payload: schemas.ImageUpload,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    return user_service.update_avatar(db, current_user, payload.image)


@router.put("/cover", response_model=schemas.UserAccount)
def update_cover(
    payload: schemas.ImageUpload,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.User:
    return user_service.update_cover(db, current_user, payload.image)


@router.put("/password", response_model=schemas.MessageResponse)
def change_password(
    payload: schemas.PasswordChange,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.MessageResponse:
    user_service.change_password(db, current_user, payload.current_password, payload.new_password)
    return schemas.MessageResponse(message="Password updated")


@router.get("/settings", response_model=schemas.SettingsOut)
def get_settings(current_user: models.User = Depends(get_current_user)) -> models.UserSettings:
    return current_user.settings


@router.patch("/settings", response_model=schemas.SettingsOut)
def update_settings(
    payload: schemas.SettingsUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.UserSettings:
    return user_service.update_settings(db, current_user, payload)
