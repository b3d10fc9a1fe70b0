# =============================================================================
# DevOps Web App - Main Application
# =============================================================================
"""
DevOps Web Application

A small HTTP service exposing health, readiness and metrics probes plus a
single validated data ingestion endpoint, wrapped in the standard request
policies.

Request pipeline (outermost first):
- Security headers
- CORS
- Rate limiting (per client, moving window)
- Compression
- Access logging
- Unhandled error capture
- Body parsing (per route, 10 MB cap)

Errors from any stage share one JSON envelope (see api.errors).
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from .api import register_error_handlers, router
from .config import Settings, get_settings
from .middleware import (
    AccessLogMiddleware,
    ClientRateLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
)


CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization"]
GZIP_MINIMUM_SIZE = 1024


# =============================================================================
# Logging Configuration
# =============================================================================

def configure_logging(settings: Settings) -> None:
    """
    Configure structured logging with structlog.

    Production renders JSON lines for log collectors; other environments
    use the human-readable console renderer.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(settings.log_level.upper())

    # ConsoleRenderer formats exc_info itself
    if settings.is_production:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *renderers,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    logger = structlog.get_logger(__name__)
    logger.info("startup_complete", message="DevOps Web App ready to accept requests")
    yield
    logger.info("shutdown_complete", message="Process terminated")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration; read from the environment if omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    # Configure logging first
    configure_logging(settings)

    docs_enabled = not settings.is_production
    app = FastAPI(
        title="DevOps Web Application",
        description="Health, readiness and metrics probes with a validated data ingestion endpoint.",
        version=settings.app_version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiter = ClientRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        storage_uri=settings.rate_limit_storage_uri,
    )

    # Starlette runs middleware in reverse registration order, so the
    # innermost policy is registered first.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(AccessLogMiddleware, combined=settings.is_production)
    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    app.add_middleware(SecurityHeadersMiddleware)

    register_error_handlers(app)
    app.include_router(router)

    logger = structlog.get_logger(__name__)
    logger.info(
        "application_startup",
        service=settings.service_name,
        environment=settings.environment,
        allowed_origins=settings.allowed_origins_list,
        rate_limit=f"{settings.rate_limit_max_requests}/{settings.rate_limit_window_seconds}s",
    )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()
