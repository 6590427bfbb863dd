"""Sign-up, sign-in and sign-out for users."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import (
    ROLE_USER,
    clear_auth_cookie,
    create_access_token,
    get_current_user,
    set_auth_cookie,
)
from ..deps import get_db
from ..services import users as user_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=schemas.UserAccount, status_code=status.HTTP_201_CREATED)
def signup(
    payload: schemas.SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> models.User:
    """
    Create an account and sign it in.

    The session token is set as an HttpOnly cookie.
    """
    user = user_service.signup(db, payload)
    set_auth_cookie(response, create_access_token(user.id, ROLE_USER), ROLE_USER)
    return user


@router.post("/login", response_model=schemas.UserAccount)
def login(
    payload: schemas.LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> models.User:
    user = user_service.authenticate(db, payload.username, payload.password)
    set_auth_cookie(response, create_access_token(user.id, ROLE_USER), ROLE_USER)
    return user


@router.post("/logout", response_model=schemas.MessageResponse)
def logout(response: Response) -> schemas.MessageResponse:
    clear_auth_cookie(response)
    return schemas.MessageResponse(message="Logged out")


@router.get("/me", response_model=schemas.UserAccount)
def me(current_user: models.User = Depends(get_current_user)) -> models.User:
    return current_user
