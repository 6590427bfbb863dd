"""HTTP middleware for the API."""

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from . import settings

logger = logging.getLogger(__name__)

# Paths too noisy to log on every hit
QUIET_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}
QUIET_PATH_PREFIXES = ("/vault/",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if request.method == "OPTIONS" or path in QUIET_PATHS or path.startswith(QUIET_PATH_PREFIXES):
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        message = f"{request.method} {path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        if response.status_code >= 500:
            logger.error(message)
        else:
            logger.info(message)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    The API serves JSON and uploaded images only, so the CSP is strict.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=(), payment=()"

        if settings.ENVIRONMENT == "production" or request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        response.headers["Content-Security-Policy"] = "default-src 'none'; img-src 'self'; frame-ancestors 'none'"
        return response
