# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the StudyPulse API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src import __version__
from src.api.middleware import RequestContextMiddleware
from src.api.routes import health
from src.api.schemas import ApiResponse
from src.api.v1 import router as v1_router
from src.core.config import get_settings
from src.domains.analytics import AnalyticsError, FetchError
from src.infrastructure.database import DatabaseError, close_database, init_database
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.
    Initializes and cleans up:
    - Structured logging
    - Database connection pool

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting StudyPulse API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    try:
        await init_database(settings)
        logger.info("Database connection pool initialized")
    except DatabaseError as e:
        # Endpoints answer 503 until the database is available
        logger.warning("Failed to initialize database connection pool: %s", str(e))

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    await close_database()
    logger.info("Shutting down StudyPulse API")


# =========================================================================
# Exception handlers
# =========================================================================


def _envelope(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.fail(message).model_dump(),
        headers=headers,
    )


async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    """Report a failed analytics bundle as 503 with the error envelope."""
    if isinstance(exc, FetchError):
        logger.error(
            "Analytics fetch failed: operation=%s, path=%s, error=%s",
            exc.operation,
            request.url.path,
            str(exc),
        )
    else:
        logger.error("Analytics request failed: path=%s, error=%s", request.url.path, str(exc))
    return _envelope(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report any unexpected failure as 500 with the error envelope."""
    logger.exception("Unhandled error: path=%s", request.url.path, exc_info=exc)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap HTTP errors (401, 404, 422 raised by endpoints) in the envelope."""
    return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Wrap query parameter validation errors in the envelope."""
    errors = jsonable_encoder(exc.errors())
    message = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in errors
    )
    return _envelope(status.HTTP_422_UNPROCESSABLE_ENTITY, message or "Invalid request")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="StudyPulse API",
        description="Learning analytics backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(AnalyticsError, analytics_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================
    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
