"""
Newsgate API - news publishing backend.

FastAPI application fronting the newsroom database: articles, comments,
moderation, view counts, subscriptions and collaborator integrations.
"""

import asyncio
import contextlib
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from newsgate.config import settings, validate_security_settings
from newsgate.database import AsyncSessionLocal, close_db, init_db
from newsgate.logging_config import setup_logging
from newsgate.middleware.rate_limit import limiter
from newsgate.routers.admin import router as admin_router
from newsgate.routers.ai import router as ai_router
from newsgate.routers.articles import router as articles_router
from newsgate.routers.comments import router as comments_router
from newsgate.routers.email import router as email_router
from newsgate.routers.interactions import router as interactions_router
from newsgate.routers.moderation import router as moderation_router
from newsgate.routers.moderator import router as moderator_router
from newsgate.routers.schedule import router as schedule_router
from newsgate.routers.settings import router as settings_router
from newsgate.routers.stripe import router as stripe_router
from newsgate.routers.telegram import router as telegram_router
from newsgate.routers.users import router as users_router
from newsgate.services.publication import PublicationScheduler

# Import models to register them with Base.metadata
from newsgate.models import Article, User  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    setup_logging(json_output=settings.json_logs, level=settings.log_level)
    validate_security_settings()
    await init_db()

    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    scheduler = None
    sweep_task = None
    if settings.publication_sweep_interval_seconds > 0:
        scheduler = PublicationScheduler(
            AsyncSessionLocal, settings.publication_sweep_interval_seconds
        )
        sweep_task = asyncio.create_task(scheduler.start())

    logger.info("Newsgate API started (%s)", settings.environment)
    yield

    if scheduler is not None:
        await scheduler.stop()
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task

    await app.state.http_client.aclose()
    await close_db()
    logger.info("Newsgate API stopped")


app = FastAPI(
    title="Newsgate API",
    description="Backend gateway for a news publishing platform",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter state
app.state.limiter = limiter

# Rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Include routers
app.include_router(articles_router)
app.include_router(comments_router)
app.include_router(interactions_router)
app.include_router(moderator_router)
app.include_router(schedule_router)
app.include_router(stripe_router)
app.include_router(email_router)
app.include_router(telegram_router)
app.include_router(ai_router)
app.include_router(moderation_router)
app.include_router(settings_router)
app.include_router(admin_router)
app.include_router(users_router)


# --- Middleware ---


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add a unique request ID to each request."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# --- Exception Handlers ---


def _sanitize_error_detail(error: dict[str, Any]) -> dict[str, Any]:
    """Sanitize Pydantic error detail to be JSON-serializable."""
    sanitized = {}
    for key, value in error.items():
        if key == "ctx":
            sanitized[key] = {k: str(v) for k, v in value.items()} if isinstance(value, dict) else str(value)
        elif key == "loc":
            sanitized[key] = [str(loc) for loc in value]
        elif key == "input":
            # May echo passwords or bytes back to the caller
            continue
        else:
            sanitized[key] = value
    return sanitized


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with consistent error format."""
    request_id = getattr(request.state, "request_id", None)

    errors = [_sanitize_error_detail(e) for e in exc.errors()]
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        msg = first_error.get("msg", "Validation error")
        message = f"{field}: {msg}" if field else msg
    else:
        message = "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": message,
                "request_id": request_id,
                "details": errors,
            }
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent error format."""
    request_id = getattr(request.state, "request_id", None)
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path,
        exc_info=exc,
        extra={"request_id": request_id},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "request_id": request_id,
            }
        },
    )


# --- Health Check ---


@app.get("/api/v1/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK if the API is running.
    """
    return {"status": "healthy"}
