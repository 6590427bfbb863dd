"""Operational error taxonomy and the handlers that render it.

Every handled failure is returned as ``{"status": "error", "message": ..., "logout": ...}``.
``logout`` is only true for credential failures so the client can drop its session.
"""

from __future__ import annotations

import logging
import re

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Error that is safe to show to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None, logout: bool = False):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.logout = logout


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Token is invalid or expired"):
        super().__init__(message, logout=True)


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


# Postgres: Key (email)=(a@b.c) already exists.   SQLite: UNIQUE constraint failed: users.email
_PG_UNIQUE_RE = re.compile(r"Key \((?P<field>[^)]+)\)=")
_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: \w+\.(?P<field>\w+)")


def conflict_from_integrity_error(exc: IntegrityError) -> ConflictError:
    """Translate a unique violation into a ConflictError naming the field."""
    text = str(exc.orig) if exc.orig is not None else str(exc)
    match = _PG_UNIQUE_RE.search(text) or _SQLITE_UNIQUE_RE.search(text)
    field = match.group("field") if match else "Resource"
    return ConflictError(f"{field.capitalize()} already exists.")


def error_body(message: str, logout: bool = False) -> dict:
    return {"status": "error", "message": message, "logout": logout}


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):  # type: ignore[override]
        if exc.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.logout))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(status_code=exc.status_code, content=error_body(message))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):  # type: ignore[override]
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))

    @app.exception_handler(IntegrityError)
    async def _integrity_error(request: Request, exc: IntegrityError):  # type: ignore[override]
        conflict = conflict_from_integrity_error(exc)
        return JSONResponse(status_code=conflict.status_code, content=error_body(conflict.message))

    @app.exception_handler(SQLAlchemyError)
    async def _storage_error(request: Request, exc: SQLAlchemyError):  # type: ignore[override]
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Something went wrong!"),
        )

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):  # type: ignore[override]
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Something went wrong!"),
        )
