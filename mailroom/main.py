"""Mailroom API: FastAPI application factory."""


import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mailroom.core.config import settings
from mailroom.core.exceptions import register_exception_handlers
from mailroom.core.security import build_authenticator
from mailroom.db.base import create_tables
from mailroom.middleware.request_log import RequestLogMiddleware
from mailroom.routers.insights import activity_router
from mailroom.routers.insights import router as insights_router
from mailroom.routers.integrations import audit_router
from mailroom.routers.integrations import router as integrations_router
from mailroom.routers.mail_items import router as mail_items_router
from mailroom.routers.notifications import router as notifications_router
from mailroom.routers.organizations import mailroom_router
from mailroom.routers.organizations import router as organizations_router
from mailroom.routers.pickups import router as pickups_router
from mailroom.routers.recipients import external_router
from mailroom.routers.recipients import router as recipients_router
from mailroom.routers.scan import router as scan_router
from mailroom.schemas.common import HealthResponse

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.is_development else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables and settings.is_development:
        logger.info("Creating missing tables (development)")
        await create_tables()
    yield


def create_app() -> FastAPI:
    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # --- Token verification, chosen once per deployment ---
    app.state.authenticator = build_authenticator(settings)
    logger.info("Authentication provider: %s", settings.auth_provider)

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Request logging ---
    app.add_middleware(RequestLogMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app)

    # --- API routes (/api/*) ---
    for router in (
        mail_items_router,
        pickups_router,
        notifications_router,
        insights_router,
        activity_router,
        scan_router,
        organizations_router,
        mailroom_router,
        recipients_router,
        external_router,
        integrations_router,
        audit_router,
    ):
        app.include_router(router, prefix="/api")

    # --- Health check ---
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        return HealthResponse(app=settings.app_name, env=settings.app_env)

    return app


app = create_app()
