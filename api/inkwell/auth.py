from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import models, settings
from .deps import get_db
from .errors import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

# Bearer tokens are accepted as an alternative to the session cookie
oauth2_scheme = HTTPBearer(auto_error=False)

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise RuntimeError(
        "JWT_SECRET_KEY environment variable is required but not set. "
        "Generate a secure key with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
# 256 bits minimum
if len(JWT_SECRET_KEY) < 32:
    raise RuntimeError(
        "JWT_SECRET_KEY is too short. Must be at least 32 characters long. "
        "Generate a secure key with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(subject_id: uuid.UUID, role: str = ROLE_USER, expires_in_seconds: int | None = None) -> str:
    """
    Create a signed JWT for a user or an admin.

    Args:
        subject_id: User.id or Admin.id
        role: ROLE_USER or ROLE_ADMIN
        expires_in_seconds: Override the role's default lifetime
    """
    if expires_in_seconds is None:
        hours = settings.ADMIN_TOKEN_TTL_HOURS if role == ROLE_ADMIN else settings.USER_TOKEN_TTL_HOURS
        expires_in_seconds = hours * 3600

    now = datetime.now(timezone.utc)
    payload = {
        "id": str(subject_id),
        "role": role,
        "exp": now + timedelta(seconds=expires_in_seconds),
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify a token and return its claims. Raises UnauthorizedError on any failure."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is a subclass
        raise UnauthorizedError()

    if not payload.get("id") or payload.get("role") not in (ROLE_USER, ROLE_ADMIN):
        raise UnauthorizedError()
    try:
        payload["id"] = uuid.UUID(payload["id"])
    except (TypeError, ValueError):
        raise UnauthorizedError()
    return payload


def set_auth_cookie(response: Response, token: str, role: str = ROLE_USER) -> None:
    hours = settings.ADMIN_TOKEN_TTL_HOURS if role == ROLE_ADMIN else settings.USER_TOKEN_TTL_HOURS
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=hours * 3600,
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE,
    )


def _extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    cookie_token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if cookie_token:
        return cookie_token
    if credentials:
        return credentials.credentials
    return None


def _claims_for_role(request: Request, credentials: HTTPAuthorizationCredentials | None, role: str) -> dict:
    token = _extract_token(request, credentials)
    if not token:
        raise UnauthorizedError("No token provided")
    payload = decode_access_token(token)
    if payload["role"] != role:
        raise ForbiddenError("User access only" if role == ROLE_USER else "Access denied")
    return payload


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    """
    Get the authenticated user from the session cookie or Bearer token.

    Suspended users still authenticate; mutations reject them separately
    via ensure_can_mutate.
    """
    payload = _claims_for_role(request, credentials, ROLE_USER)
    user = db.query(models.User).filter(models.User.id == payload["id"]).first()
    if not user or not user.is_active:
        raise UnauthorizedError()
    return user


def get_current_user_optional(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User | None:
    """
    Get current user if authenticated, None otherwise.

    Used for read endpoints that work for anonymous viewers too. A bad or
    foreign-role token is treated as anonymous.
    """
    if _extract_token(request, credentials) is None:
        return None
    try:
        return get_current_user(request, credentials, db)
    except (UnauthorizedError, ForbiddenError):
        return None


def get_current_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.Admin:
    """Get the authenticated, non-deleted admin."""
    payload = _claims_for_role(request, credentials, ROLE_ADMIN)
    admin = db.query(models.Admin).filter(models.Admin.id == payload["id"]).first()
    if not admin or admin.is_deleted:
        raise UnauthorizedError()
    return admin


def get_current_admin_optional(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.Admin | None:
    if _extract_token(request, credentials) is None:
        return None
    try:
        return get_current_admin(request, credentials, db)
    except (UnauthorizedError, ForbiddenError):
        return None


def require_super_admin(admin: models.Admin = Depends(get_current_admin)) -> models.Admin:
    if not admin.is_super_admin:
        raise ForbiddenError("Super admin access required")
    return admin


def ensure_can_mutate(user: models.User) -> None:
    """
    Reject mutations from suspended users and from the shared guest account.

    Must run before any write so a rejected request leaves no trace.
    """
    if user.suspended:
        raise ForbiddenError("Your account has been suspended")
    if settings.GUEST_USER_ID and str(user.id) == settings.GUEST_USER_ID:
        raise ForbiddenError("Guest users cannot perform this action.")
