"""
FastAPI application factory.

``create_app()`` wires middleware, routers, error handlers, and the
lifespan that starts and stops the scheduler into a single ``FastAPI``
instance.

Manifesto:
    The app factory is the single composition root — the scheduler,
    middleware, routers, and lifecycle hooks are wired here so the rest
    of the codebase never touches ``FastAPI`` directly.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from smalljob.api.deps import get_settings
from smalljob.api.middleware.errors import (
    smalljob_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from smalljob.api.middleware.request_context import RequestContextMiddleware
from smalljob.api.settings import SmallJobAPISettings
from smalljob.core.errors import SmallJobError
from smalljob.core.logging import get_logger
from smalljob.core.scheduling import SmallJobScheduler, create_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — start the scheduler, stop it on shutdown."""
    log = get_logger("smalljob.api")
    scheduler: SmallJobScheduler = app.state.scheduler
    log.info("smalljob API starting", version=app.version, timezone=scheduler.clock.timezone_name)
    scheduler.start()
    try:
        yield
    finally:
        scheduler.stop()
        log.info("smalljob API shutting down")


def create_app(
    *,
    settings: SmallJobAPISettings | None = None,
    scheduler: SmallJobScheduler | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : SmallJobAPISettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    scheduler : SmallJobScheduler | None
        Pre-built scheduler (e.g. with a custom job body).  When ``None``
        one is created from ``settings``.
    """

    settings = settings or get_settings()
    scheduler = scheduler or create_scheduler(settings)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    # Stash settings and the one scheduler on app state
    app.state.settings = settings
    app.state.scheduler = scheduler

    # Override DI so endpoints use the provided settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware ──────────────────────────────────────────────────
    app.add_middleware(
        RequestContextMiddleware,
        quiet_paths=(f"{settings.api_prefix}/status", "/health/live"),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(SmallJobError, smalljob_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from smalljob.api.routers import health, small

    # Health endpoints at root level (no prefix) for container healthchecks
    app.include_router(health.router, tags=["health"])
    app.include_router(small.router, prefix=settings.api_prefix, tags=["scheduler"])

    return app
