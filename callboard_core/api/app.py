"""
FastAPI Application Module

This module provides the main FastAPI application setup with
routes, middleware, exception handlers and configuration.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Type

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..analytics.errors import (
    AgentNotFoundError,
    AnalyticsError,
    InvalidDateError,
    InvalidRangeError,
    RepositoryError,
)
from ..config import Settings, get_settings
from ..database.base import close_database, get_database, init_database
from ..telemetry import configure_logging
from .base import APIError, APIException, ErrorCode, error_response, generate_request_id
from .middleware import RequestTrackingMiddleware
from .routes import analytics_router


logger = structlog.get_logger(__name__)


# Analytics error kinds and how they surface over HTTP
ANALYTICS_ERROR_MAP: Dict[Type[AnalyticsError], Tuple[int, ErrorCode]] = {
    InvalidDateError: (400, ErrorCode.INVALID_QUERY_PARAMETER),
    InvalidRangeError: (400, ErrorCode.INVALID_QUERY_PARAMETER),
    AgentNotFoundError: (404, ErrorCode.RESOURCE_NOT_FOUND),
    RepositoryError: (500, ErrorCode.DEPENDENCY_FAILURE),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or generate_request_id()


# =============================================================================
# Health Check Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    timestamp: datetime
    checks: Dict[str, Any] = {}


# =============================================================================
# Exception Handlers
# =============================================================================


async def api_exception_handler(request: Request, exc: APIException):
    """Handle API exceptions."""
    request_id = _request_id(request)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.to_error(request_id), request_id),
    )


async def analytics_exception_handler(request: Request, exc: AnalyticsError):
    """Map analytics error kinds to HTTP status and a sanitized message."""
    request_id = _request_id(request)
    status_code, code = ANALYTICS_ERROR_MAP.get(
        type(exc), (500, ErrorCode.INTERNAL_ERROR)
    )

    if status_code >= 500:
        logger.error(
            "analytics_request_failed",
            error_type=type(exc).__name__,
            error=str(exc),
            cause=repr(getattr(exc, "cause", None)),
            path=request.url.path,
        )
        error = APIError(
            code=code,
            message="Failed to fetch analytics data",
            request_id=request_id,
        )
    else:
        logger.info(
            "analytics_request_rejected",
            error_type=type(exc).__name__,
            error=exc.message,
            path=request.url.path,
        )
        error = APIError(
            code=code,
            message=exc.message,
            details=exc.details,
            field=exc.field,
            request_id=request_id,
        )

    return JSONResponse(
        status_code=status_code,
        content=error_response(error, request_id),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions."""
    request_id = _request_id(request)

    # Map HTTP status to error code
    error_codes = {
        400: ErrorCode.VALIDATION_ERROR,
        401: ErrorCode.AUTHENTICATION_REQUIRED,
        404: ErrorCode.RESOURCE_NOT_FOUND,
        422: ErrorCode.VALIDATION_ERROR,
    }
    error = APIError(
        code=error_codes.get(exc.status_code, ErrorCode.INTERNAL_ERROR),
        message=str(exc.detail),
        request_id=request_id,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(error, request_id),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    request_id = _request_id(request)

    logger.exception("unhandled_exception", error=str(exc), path=request.url.path)

    error = APIError(
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred",
        request_id=request_id,
    )
    return JSONResponse(
        status_code=500,
        content=error_response(error, request_id),
    )


# =============================================================================
# Application Factory
# =============================================================================


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (defaults to environment)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Callboard analytics API", environment=settings.environment)

        db = init_database(
            database_url=settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            echo=settings.debug,
        )

        # Create tables if requested (for development)
        if settings.create_tables and not settings.is_production:
            logger.info("Creating database tables")
            await db.create_all()

        if await db.health_check():
            logger.info("Database connection established")
        else:
            logger.error("Database connection failed")

        yield

        logger.info("Shutting down Callboard analytics API")
        await close_database()

    app = FastAPI(
        title="Callboard Analytics API",
        description="Call-center dashboard analytics",
        version=settings.version,
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.settings = settings

    # ==========================================================================
    # Middleware (first added = innermost)
    # ==========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestTrackingMiddleware)

    # ==========================================================================
    # Exception Handlers
    # ==========================================================================

    app.add_exception_handler(AnalyticsError, analytics_exception_handler)
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ==========================================================================
    # Routes
    # ==========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        try:
            db_healthy = await get_database().health_check()
        except RuntimeError:
            db_healthy = False

        return HealthResponse(
            status="healthy" if db_healthy else "degraded",
            version=settings.version,
            timestamp=_utcnow(),
            checks={
                "api": "ok",
                "database": "ok" if db_healthy else "error",
            },
        )

    app.include_router(analytics_router, prefix=settings.api_prefix)

    return app


# =============================================================================
# Entry Point
# =============================================================================


def run_server(reload: bool = False):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "callboard_core.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run_server(reload=True)
