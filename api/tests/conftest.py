from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Generator

# Settings are read at import time, so the environment is prepared first
_TMP_ROOT = Path(tempfile.mkdtemp(prefix="inkwell-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_ROOT / 'import.db'}"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["VAULT_LOCATION"] = str(_TMP_ROOT / "vault")
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ.pop("GUEST_USER_ID", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from inkwell import models  # noqa: E402
from inkwell.auth import ROLE_ADMIN, ROLE_USER, create_access_token, hash_password  # noqa: E402
from inkwell.db import Base  # noqa: E402
from inkwell.deps import get_db  # noqa: E402
from inkwell.main import app  # noqa: E402

DEFAULT_PASSWORD = "correct-horse-battery"

SAMPLE_CONTENT = {
    "time": 1700000000000,
    "blocks": [
        {"id": "b1", "type": "header", "data": {"text": "Hello", "level": 2}},
        {"id": "b2", "type": "paragraph", "data": {"text": "A short paragraph of words."}},
    ],
    "version": "2.28.0",
}


@pytest.fixture()
def session_factory(tmp_path: Path) -> Generator[sessionmaker, None, None]:
    """Fresh SQLite database per test."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    try:
        yield factory
    finally:
        engine.dispose()


@pytest.fixture()
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """API client bound to the per-test database. Lifespan (migrations) is not run."""

    def override_get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture()
def make_user(db: Session) -> Callable[..., models.User]:
    counter = iter(range(1, 10_000))

    def _make(
        username: str | None = None,
        suspended: bool = False,
        is_active: bool = True,
        display_name: str | None = None,
        bio: str | None = None,
    ) -> models.User:
        n = next(counter)
        username = username or f"reader{n:04d}"
        user = models.User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(DEFAULT_PASSWORD),
            suspended=suspended,
            is_active=is_active,
        )
        user.profile = models.Profile(display_name=display_name or username.title(), bio=bio, socials=[])
        user.settings = models.UserSettings()
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_category(db: Session) -> Callable[..., models.Category]:
    counter = iter(range(1, 10_000))

    def _make(name: str | None = None) -> models.Category:
        name = name or f"Category {next(counter)}"
        category = models.Category(name=name, slug=name.lower().replace(" ", "-"))
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture()
def category(make_category) -> models.Category:
    return make_category("Technology")


@pytest.fixture()
def make_post(db: Session, category: models.Category) -> Callable[..., models.Post]:
    counter = iter(range(1, 10_000))
    base_time = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _make(
        author: models.User,
        title: str | None = None,
        published: bool = True,
        content: dict | None = SAMPLE_CONTENT,
        published_at: datetime | None = None,
        created_at: datetime | None = None,
        is_featured: bool = False,
        suspended: bool = False,
        is_deleted: bool = False,
        views: int = 0,
        tags: list[str] | None = None,
        post_category: models.Category | None = None,
    ) -> models.Post:
        n = next(counter)
        stamp = base_time + timedelta(hours=n)
        post = models.Post(
            title=title or f"Post number {n}",
            slug=f"post-number-{n}-{author.username}",
            summary="A summary long enough",
            content=content,
            category_id=(post_category or category).id,
            author_id=author.id,
            published=published,
            published_at=published_at or (stamp if published else None),
            created_at=created_at or stamp,
            is_featured=is_featured,
            suspended=suspended,
            is_deleted=is_deleted,
            views=views,
            read_time=1,
            tags=tags or ["general"],
        )
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    return _make


@pytest.fixture()
def make_admin(db: Session) -> Callable[..., models.Admin]:
    counter = iter(range(1, 10_000))

    def _make(is_super_admin: bool = True, is_deleted: bool = False) -> models.Admin:
        n = next(counter)
        admin = models.Admin(
            admin_code=f"ADM-20260101-{n:04d}",
            username=f"admin{n}",
            email=f"admin{n}@example.com",
            password_hash=hash_password(DEFAULT_PASSWORD),
            name=f"Admin {n}",
            is_super_admin=is_super_admin,
            is_deleted=is_deleted,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin

    return _make


def auth_headers(user: models.User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, ROLE_USER)}"}


def admin_headers(admin: models.Admin) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(admin.id, ROLE_ADMIN)}"}
