"""
API Dependencies

This module provides FastAPI dependencies for database sessions,
caller identity, and the analytics services.
"""

from typing import AsyncGenerator, Optional

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..analytics import AggregationEngine, AnalyticsFacade, CallerContext, SessionRepository
from ..config import Settings, get_settings
from ..database.base import get_database
from ..database.repositories import SQLSessionRepository
from .base import AuthenticationError


logger = structlog.get_logger(__name__)


# =============================================================================
# Database Session Dependency
# =============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Usage in routes:
        @router.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_database().session() as session:
        yield session


# =============================================================================
# Caller Context
# =============================================================================


async def get_caller_context(
    x_organization_id: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> CallerContext:
    """
    Resolve the tenant issuing the request.

    Identity is established upstream; this service only requires the
    organization header and never falls back to a default tenant.
    """
    organization_id = (x_organization_id or "").strip()
    if not organization_id:
        raise AuthenticationError(
            message="X-Organization-ID header is required",
        )

    structlog.contextvars.bind_contextvars(organization_id=organization_id)
    return CallerContext(organization_id=organization_id, user_id=x_user_id)


# =============================================================================
# Analytics Dependencies
# =============================================================================


async def get_session_repository(
    db: AsyncSession = Depends(get_db_session),
) -> SessionRepository:
    """Session store bound to the request's database session."""
    return SQLSessionRepository(db)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_analytics_facade(
    repository: SessionRepository = Depends(get_session_repository),
    settings: Settings = Depends(get_app_settings),
) -> AnalyticsFacade:
    """Analytics facade configured from settings."""
    return AnalyticsFacade(
        repository,
        engine=AggregationEngine(zero_fill=settings.analytics_zero_fill),
        global_default_days=settings.analytics_default_days,
        agent_default_days=settings.agent_analytics_default_days,
        recent_calls_limit=settings.recent_calls_limit,
    )


__all__ = [
    "get_db_session",
    "get_caller_context",
    "get_session_repository",
    "get_app_settings",
    "get_analytics_facade",
]
