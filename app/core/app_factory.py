"""Application factory for FastAPI app.

Centralizes app construction (metadata, lifespan, middleware, handlers,
routers) so tests and the ASGI entrypoint build the same app.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.deps import close_adapters, get_post_store, init_adapters
from app.api.routes import health_router, posts_router, profile_router
from app.core.auth import ensure_session_verification_configured
from app.core.config import settings
from app.core.errors import ConfigurationAppError
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build adapters and create tables on startup; close adapters on shutdown.

    Missing keys or unknown adapter names raise here, so a misconfigured
    deployment never starts serving requests.
    """
    try:
        ensure_session_verification_configured()
        init_adapters()
    except ConfigurationAppError as exc:
        logger.critical("app.startup_failed", extra={"error_code": exc.code})
        await close_adapters()
        raise

    if settings.database.create_tables:
        store = get_post_store()
        create_tables = getattr(store, "create_tables", None)
        if create_tables is not None:
            await create_tables()
            logger.info("db.tables_created")

    logger.info("app.started", extra={"app_env": settings.app_env})
    try:
        yield
    finally:
        await close_adapters()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Emoji Feed API",
        description=(
            "Backend for an emoji-only microblog: a global feed, per-author feeds, "
            "single posts joined with their authors' public profiles, and "
            "rate-limited post creation for signed-in users."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(posts_router, prefix="/v1")
    app.include_router(profile_router, prefix="/v1")
    app.include_router(health_router)

    # OpenAPI customizations (security scheme, tags, public operations)
    apply_openapi_customizations(app)

    return app
