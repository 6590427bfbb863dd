"""Admin accounts: sign-in, self-service and super admin management."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import (
    ROLE_ADMIN,
    clear_auth_cookie,
    create_access_token,
    get_current_admin,
    get_current_admin_optional,
    require_super_admin,
    set_auth_cookie,
)
from ..deps import get_db
from ..services import admins as admin_service

router = APIRouter(prefix="/admins", tags=["Admins"])


@router.post("", response_model=schemas.AdminOut, status_code=status.HTTP_201_CREATED)
def create_admin(
    payload: schemas.AdminCreate,
    db: Session = Depends(get_db),
    actor: models.Admin | None = Depends(get_current_admin_optional),
) -> models.Admin:
    """
    Create an admin account.

    While no admin exists the endpoint is open and the first account becomes a
    super admin. Afterwards only a signed-in super admin may call it.
    """
    return admin_service.create_admin(db, actor, payload)


@router.post("/login", response_model=schemas.AdminOut)
def login(
    payload: schemas.AdminLogin,
    response: Response,
    db: Session = Depends(get_db),
) -> models.Admin:
    admin = admin_service.authenticate_admin(db, payload.email, payload.password)
    set_auth_cookie(response, create_access_token(admin.id, ROLE_ADMIN), ROLE_ADMIN)
    return admin


@router.post("/logout", response_model=schemas.MessageResponse)
def logout(response: Response) -> schemas.MessageResponse:
    clear_auth_cookie(response)
    return schemas.MessageResponse(message="Logged out")


@router.get("/me", response_model=schemas.AdminOut)
def me(admin: models.Admin = Depends(get_current_admin)) -> models.Admin:
    return admin


@router.patch("/me", response_model=schemas.AdminOut)
def update_me(
    payload: schemas.AdminProfileUpdate,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Admin:
    return admin_service.update_admin_profile(db, admin, payload)


@router.put("/me/email", response_model=schemas.AdminOut)
def update_email(
    payload: schemas.EmailUpdate,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Admin:
    return admin_service.update_admin_email(db, admin, payload.email)


@router.put("/me/avatar", response_model=schemas.AdminOut)
def update_avatar(
    payload: schemas.ImageUpload,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> models.Admin:
    return admin_service.update_admin_avatar(db, admin, payload.image)


@router.put("/me/password", response_model=schemas.MessageResponse)
def change_password(
    payload: schemas.PasswordChange,
    db: Session = Depends(get_db),
    admin: models.Admin = Depends(get_current_admin),
) -> schemas.MessageResponse:
    admin_service.change_admin_password(db, admin, payload.current_password, payload.new_password)
    return schemas.MessageResponse(message="Password updated")


@router.get("", response_model=list[schemas.AdminOut])
def list_admins(
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> list[models.Admin]:
    return admin_service.list_admins(db)


@router.get("/{admin_id}", response_model=schemas.AdminOut)
def get_admin(
    admin_id: UUID,
    db: Session = Depends(get_db),
    _: models.Admin = Depends(get_current_admin),
) -> models.Admin:
    return admin_service.get_admin(db, admin_id)


@router.delete("/{admin_id}", response_model=schemas.AdminOut)
def delete_admin(
    admin_id: UUID,
    db: Session = Depends(get_db),
    actor: models.Admin = Depends(require_super_admin),
) -> models.Admin:
    """Soft-delete an admin. Super admins only; an admin cannot delete itself."""
    return admin_service.delete_admin(db, actor, admin_id)
