"""URL Shortener Service - Main FastAPI Application.

An in-memory URL shortening service with:
- Create short URLs with custom codes and validity
- Redirect to original URLs
- Per-click analytics
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from datetime import timedelta
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.exceptions import ShortenerError
from .core.logging import setup_logging, shutdown_logging
from .core.registry import Registry
from .api.routes import health_router, urls_router

logger = logging.getLogger(__name__)


async def purge_expired_periodically(registry: Registry, interval: float) -> None:
    """Drop expired records every ``interval`` seconds until cancelled."""
    grace = timedelta(minutes=settings.purge_grace_minutes)
    while True:
        await asyncio.sleep(interval)
        registry.purge_expired(grace)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.app_title}...")
    registry = Registry()
    app.state.registry = registry
    logger.info("URL registry initialized")

    purge_task = None
    if settings.purge_interval_seconds > 0:
        purge_task = asyncio.create_task(
            purge_expired_periodically(registry, settings.purge_interval_seconds)
        )
        logger.info(f"Expired URL purge every {settings.purge_interval_seconds}s")
    yield
    # Shutdown
    logger.info("Shutting down URL Shortener Service...")
    if purge_task is not None:
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task
    shutdown_logging()


# Create FastAPI application
app = FastAPI(
    title=settings.app_title,
    description=settings.app_description,
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every incoming request."""
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the JSON body shared by all error responses."""
    return JSONResponse(
        status_code=status_code,
        content={"error": HTTPStatus(status_code).phrase, "message": message},
    )


@app.exception_handler(ShortenerError)
async def shortener_exception_handler(request: Request, exc: ShortenerError):
    """Map registry and validation errors to HTTP responses."""
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject unparseable request bodies."""
    logger.error(f"Invalid request body: {exc.errors()}")
    return error_response(400, "Invalid JSON")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler."""
    logger.error(f"Unhandled Exception: {exc}")
    return error_response(500, "Internal server error")


# Include routers
app.include_router(health_router)
app.include_router(urls_router)
