"""Slug helpers for posts and categories."""

from __future__ import annotations

import re
import secrets
import string

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def slugify(value: str) -> str:
    """Lower-case, runs of non-alphanumerics collapsed to a dash, no leading/trailing dashes."""
    return _NON_ALNUM.sub("-", value.lower()).strip("-")


def random_suffix(length: int = 8) -> str:
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(length))


def post_slug(title: str) -> str:
    """Slug for a post: the title plus a random suffix so equal titles never collide."""
    base = slugify(title) or "post"
    return f"{base}-{random_suffix()}"
