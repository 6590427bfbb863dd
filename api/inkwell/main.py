from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

load_dotenv()

from . import settings  # noqa: E402  settings read the environment at import
from .errors import install_error_handlers  # noqa: E402
from .image_store import get_vault_location  # noqa: E402
from .middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware  # noqa: E402
from .routers import (  # noqa: E402
    admin,
    admins,
    auth,
    categories,
    comments,
    feed,
    logs,
    posts,
    profiles,
    reports,
    social,
    system,
    users,
)

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)


def _alembic_config() -> Config:
    base_dir = Path(__file__).resolve().parent.parent
    cfg = Config(str(base_dir / "alembic.ini"))
    cfg.set_main_option("script_location", str(base_dir / "alembic"))
    return cfg


def run_migrations() -> None:
    logger.info("Running Alembic migrations...")
    try:
        command.upgrade(_alembic_config(), "head")
    except Exception as e:
        logger.error(f"run_migrations: Error occurred: {e}", exc_info=True)
        raise
    logger.info("run_migrations: Completed successfully.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application...")
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        run_migrations()
    else:
        logger.info("Skipping migrations (RUN_MIGRATIONS_ON_STARTUP is off)")
    logger.info("Inkwell API server ready")
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title="Inkwell API",
    version="1.0.0",
    description="Multi-author blogging and social reading API",
    lifespan=lifespan,
)

install_error_handlers(app)

# Comma-separated list of allowed origins. Credentials are allowed, so "*" is a misconfiguration.
cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost")
if cors_origins_str == "*":
    logger.warning(
        "CORS is configured to allow all origins. "
        "This is insecure for production. Set CORS_ORIGINS to specific domains."
    )
cors_origins = [origin.strip() for origin in cors_origins_str.split(",")]

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
    max_age=600,
)

app.include_router(system.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(profiles.router)
app.include_router(feed.router)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(social.router)
app.include_router(reports.router)
app.include_router(categories.router)
app.include_router(admins.router)
app.include_router(admin.router)
app.include_router(logs.router)

# Caddy strips the /api prefix, so uploads are served from /vault
vault_path = get_vault_location()
vault_path.mkdir(parents=True, exist_ok=True)
app.mount("/vault", StaticFiles(directory=str(vault_path)), name="vault")
logger.info(f"Mounted vault at /vault from {vault_path}")
