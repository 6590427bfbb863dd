"""Admin accounts. Admins live in their own table and sign in with their email."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import image_store, models, schemas
from ..auth import hash_password, verify_password
from ..errors import ConflictError, ForbiddenError, NotFoundError
from ..utils.audit import log_admin_action

logger = logging.getLogger(__name__)


def generate_admin_code(db: Session) -> str:
    """Human-readable admin id: ADM-YYYYMMDD-NNNN."""
    day = datetime.now(timezone.utc).strftime("%Y%m%d")
    while True:
        code = f"ADM-{day}-{secrets.randbelow(10000):04d}"
        if not db.query(models.Admin.id).filter(models.Admin.admin_code == code).first():
            return code


def _ensure_unique(db: Session, email: str | None = None, username: str | None = None, exclude_id: UUID | None = None) -> None:
    if email is not None:
        query = db.query(models.Admin.id).filter(models.Admin.email == email)
        if exclude_id is not None:
            query = query.filter(models.Admin.id != exclude_id)
        if query.first():
            raise ConflictError("Email already in use")
    if username is not None:
        query = db.query(models.Admin.id).filter(func.lower(models.Admin.username) == username.lower())
        if exclude_id is not None:
            query = query.filter(models.Admin.id != exclude_id)
        if query.first():
            raise ConflictError("Username already in use")


def create_admin(db: Session, actor: models.Admin | None, data: schemas.AdminCreate) -> models.Admin:
    """
    Create an admin account.

    The very first admin can be created without signing in and becomes a super
    admin. After that only super admins may create admins.
    """
    bootstrap = db.query(models.Admin.id).first() is None
    if not bootstrap and (actor is None or not actor.is_super_admin):
        raise ForbiddenError("Only super admins can create admins")

    _ensure_unique(db, email=data.email, username=data.username)

    admin = models.Admin(
        admin_code=generate_admin_code(db),
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        name=data.name,
        number=data.number,
        is_super_admin=bootstrap or data.is_super_admin,
    )
    if data.avatar:
        avatar = image_store.upload_image(data.avatar, "admins")
        admin.avatar_url, admin.avatar_path = avatar.url, avatar.path

    db.add(admin)
    db.flush()
    if actor is not None:
        log_admin_action(
            db, actor, models.LogAction.OTHER,
            f"Created admin {admin.username}",
            {"adminId": str(admin.id), "adminCode": admin.admin_code},
        )
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin {admin.admin_code} created")
    return admin


def authenticate_admin(db: Session, email: str, password: str) -> models.Admin:
    admin = db.query(models.Admin).filter(models.Admin.email == email).first()
    if not admin or not verify_password(password, admin.password_hash):
        raise ForbiddenError("Invalid email or password")
    if admin.is_deleted:
        raise ForbiddenError("This admin account has been deleted")
    return admin


def get_admin(db: Session, admin_id: UUID) -> models.Admin:
    admin = db.query(models.Admin).filter(models.Admin.id == admin_id).first()
    if not admin:
        raise NotFoundError("Admin not found")
    return admin


def list_admins(db: Session) -> list[models.Admin]:
    return db.query(models.Admin).order_by(models.Admin.created_at, models.Admin.username).all()


def update_admin_email(db: Session, admin: models.Admin, email: str) -> models.Admin:
    _ensure_unique(db, email=email, exclude_id=admin.id)
    admin.email = email
    db.commit()
    db.refresh(admin)
    return admin


def update_admin_profile(db: Session, admin: models.Admin, patch: schemas.AdminProfileUpdate) -> models.Admin:
    changes = patch.model_dump(exclude_unset=True)
    if changes.get("username"):
        _ensure_unique(db, username=changes["username"], exclude_id=admin.id)
        admin.username = changes["username"]
    if changes.get("name"):
        admin.name = changes["name"]
    if "number" in changes:
        admin.number = changes["number"]
    if changes:
        log_admin_action(
            db, admin, models.LogAction.UPDATE_PROFILE,
            f"Admin {admin.username} updated their profile",
            {"fields": sorted(changes)},
        )
    db.commit()
    db.refresh(admin)
    return admin


def update_admin_avatar(db: Session, admin: models.Admin, image: str) -> models.Admin:
    avatar = image_store.upload_image(image, "admins")
    old_path = admin.avatar_path
    admin.avatar_url, admin.avatar_path = avatar.url, avatar.path
    db.commit()
    db.refresh(admin)
    image_store.delete_image(old_path)
    return admin


def change_admin_password(db: Session, admin: models.Admin, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, admin.password_hash):
        raise ForbiddenError("Current password is incorrect")
    admin.password_hash = hash_password(new_password)
    db.commit()


def delete_admin(db: Session, actor: models.Admin, admin_id: UUID) -> models.Admin:
    """Soft delete. The account can no longer sign in; its log entries stay."""
    admin = get_admin(db, admin_id)
    if admin.id == actor.id:
        raise ForbiddenError("You cannot delete your own account")
    if admin.is_deleted:
        raise NotFoundError("Admin not found")
    admin.is_deleted = True
    log_admin_action(
        db, actor, models.LogAction.OTHER,
        f"Deleted admin {admin.username}",
        {"adminId": str(admin.id), "adminCode": admin.admin_code},
    )
    db.commit()
    db.refresh(admin)
    return admin
