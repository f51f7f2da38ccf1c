"""
FastAPI application entry point for the ministry administration backend.

This module creates the FastAPI app instance, installs the error handlers
and registers all routers.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.config import settings
from backend.routes.attendance import router as attendance_router
from backend.routes.auth import router as auth_router
from backend.routes.devotionals import router as devotionals_router
from backend.routes.events import router as events_router
from backend.routes.groups import router as groups_router
from backend.routes.health import router as health_router
from backend.routes.notifications import router as notifications_router
from backend.routes.observations import router as observations_router
from backend.routes.rehearsals import router as rehearsals_router
from backend.routes.scales import router as scales_router
from backend.routes.transactions import router as transactions_router
from backend.routes.users import router as users_router
from backend.utils.logging import LOG_FORMAT, resolve_log_level

# Configure logging
logging.basicConfig(level=resolve_log_level(settings.LOG_LEVEL), format=LOG_FORMAT)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: CORS_ALLOWED_ORIGINS (comma-separated); none if unset
    - anything else: all origins, for local development

    Returns:
        List of allowed origin URLs, or ["*"] outside production.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


# Create FastAPI app
app = FastAPI(
    title="Ministry Admin API",
    description="Backend service for ministry administration (members, finances, rosters)",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Return HTTPException details as the response body.

    Routers raise detail={"error": ..., "details": ...}; a plain string
    detail becomes {"error": detail}.
    """
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Reject malformed input with 400 and the field-level errors.
    """
    logger.warning(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({
            "error": "Validation error",
            "details": exc.errors(),
        })
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


# Configure CORS with environment-based origins
cors_origins = _get_cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(events_router)
app.include_router(transactions_router)
app.include_router(devotionals_router)
app.include_router(observations_router)
app.include_router(rehearsals_router)
app.include_router(attendance_router)
app.include_router(groups_router)
app.include_router(scales_router)
app.include_router(notifications_router)

logger.info("FastAPI app initialized successfully")
