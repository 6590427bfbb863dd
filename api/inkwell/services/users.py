"""User accounts: sign-up, sign-in and self-service account changes."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from .. import image_store, models, schemas
from ..auth import ensure_can_mutate, hash_password, verify_password
from ..errors import ConflictError, ForbiddenError
from ..utils.usernames import is_email_taken, is_username_taken, normalize_username

logger = logging.getLogger(__name__)


def signup(db: Session, data: schemas.SignupRequest) -> models.User:
    """Create a user together with their profile and default settings."""
    if is_email_taken(db, data.email):
        raise ConflictError("Email already in use")
    if is_username_taken(db, data.username):
        raise ConflictError("Username already in use")

    user = models.User(
        username=normalize_username(data.username),
        email=data.email,
        password_hash=hash_password(data.password),
    )
    user.profile = models.Profile(display_name=data.display_name.strip(), socials=[])
    user.settings = models.UserSettings()
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.username} signed up")
    return user


def authenticate(db: Session, username: str, password: str) -> models.User:
    user = db.query(models.User).filter(models.User.username == normalize_username(username)).first()
    if not user or not verify_password(password, user.password_hash):
        raise ForbiddenError("Invalid username or password")
    if not user.is_active:
        raise ForbiddenError("This account has been deactivated")
    return user


def update_email(db: Session, user: models.User, email: str) -> models.User:
    """Keeping your own email is fine; taking someone else's is a conflict."""
    ensure_can_mutate(user)
    if is_email_taken(db, email, exclude_user_id=user.id):
        raise ConflictError("Email already in use")
    user.email = email
    db.commit()
    db.refresh(user)
    return user


def update_username(db: Session, user: models.User, username: str) -> models.User:
    ensure_can_mutate(user)
    if is_username_taken(db, username, exclude_user_id=user.id):
        raise ConflictError("Username already in use")
    user.username = normalize_username(username)
    db.commit()
    db.refresh(user)
    return user


def update_profile(db: Session, user: models.User, patch: schemas.ProfileUpdate) -> models.User:
    ensure_can_mutate(user)
    changes = patch.model_dump(exclude_unset=True)
    profile = user.profile
    if changes.get("display_name"):
        profile.display_name = changes["display_name"].strip()
    if "bio" in changes:
        profile.bio = changes["bio"]
    if "nationality" in changes:
        profile.nationality = changes["nationality"]
    if changes.get("socials") is not None:
        profile.socials = [dict(link) for link in changes["socials"]]
    db.commit()
    db.refresh(user)
    return user


def update_avatar(db: Session, user: models.User, image: str) -> models.User:
    ensure_can_mutate(user)
    stored = image_store.upload_image(image, "avatars")
    old_path = user.profile.avatar_path
    user.profile.avatar_url, user.profile.avatar_path = stored.url, stored.path
    db.commit()
    db.refresh(user)
    image_store.delete_image(old_path)
    return user


def update_cover(db: Session, user: models.User, image: str) -> models.User:
    ensure_can_mutate(user)
    stored = image_store.upload_image(image, "covers")
    old_path = user.profile.cover_path
    user.profile.cover_url, user.profile.cover_path = stored.url, stored.path
    db.commit()
    db.refresh(user)
    image_store.delete_image(old_path)
    return user


def change_password(db: Session, user: models.User, current_password: str, new_password: str) -> None:
    ensure_can_mutate(user)
    if not verify_password(current_password, user.password_hash):
        raise ForbiddenError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    db.commit()


def update_settings(db: Session, user: models.User, patch: schemas.SettingsUpdate) -> models.UserSettings:
    ensure_can_mutate(user)
    settings = user.settings
    for field, value in patch.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(settings, field, value.value if hasattr(value, "value") else value)
    db.commit()
    db.refresh(settings)
    return settings
