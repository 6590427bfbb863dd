"""Centralized environment-driven settings.

Keep this module lightweight: stdlib only, no app imports, to avoid circular deps.
"""

from __future__ import annotations

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

# Token lifetimes. Users stay signed in for four days, admins for a working day.
USER_TOKEN_TTL_HOURS: int = _int_env("USER_TOKEN_TTL_HOURS", 96)
ADMIN_TOKEN_TTL_HOURS: int = _int_env("ADMIN_TOKEN_TTL_HOURS", 14)

# Session cookie
AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "token")
COOKIE_SECURE: bool = _bool_env("COOKIE_SECURE", ENVIRONMENT == "production")

# Password hashing cost. Tests lower this to keep bcrypt fast.
BCRYPT_ROUNDS: int = _int_env("BCRYPT_ROUNDS", 12)

# Maximum size for a single uploaded image (bytes).
# Configured via .env: IMAGE_MAX_BYTES=2097152  (2 MiB)
IMAGE_MAX_BYTES: int = _int_env("IMAGE_MAX_BYTES", 2 * 1024 * 1024)

# Demo account that may browse but never mutate anything.
GUEST_USER_ID: str | None = os.getenv("GUEST_USER_ID") or None

RUN_MIGRATIONS_ON_STARTUP: bool = _bool_env("RUN_MIGRATIONS_ON_STARTUP", True)
