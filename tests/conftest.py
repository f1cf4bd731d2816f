"""Shared pytest fixtures for testing."""

from datetime import datetime
from typing import AsyncGenerator, Callable
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from callboard_core.analytics import SessionRecord, SessionStatus
from callboard_core.config import Settings
from callboard_core.database import Agent, CallSession, DatabaseManager
from callboard_core.database.base import close_database, init_database


ORG_ID = "org_test"
OTHER_ORG_ID = "org_other"

SUPPORT_AGENT_ID = "agt_support"
SALES_AGENT_ID = "agt_sales"
RETIRED_AGENT_ID = "agt_retired"


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def make_session() -> Callable[..., SessionRecord]:
    """Factory for analytics session records."""

    def _make(
        status: SessionStatus = SessionStatus.COMPLETED,
        start_time: datetime = datetime(2024, 1, 1, 12, 0, 0),
        duration_seconds: int = 60,
        agent_id: str = SUPPORT_AGENT_ID,
        **kwargs,
    ) -> SessionRecord:
        return SessionRecord(
            session_id=kwargs.pop("session_id", f"ses_{uuid4().hex}"),
            agent_id=agent_id,
            status=status,
            start_time=start_time,
            duration_seconds=duration_seconds,
            **kwargs,
        )

    return _make


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite database file unique to the test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'callboard_test.db'}"


@pytest_asyncio.fixture
async def database(database_url: str) -> AsyncGenerator[DatabaseManager, None]:
    """Initialized global database with an empty schema."""
    db = init_database(database_url)
    await db.create_all()
    yield db
    await close_database()


@pytest_asyncio.fixture
async def seeded_database(database: DatabaseManager) -> DatabaseManager:
    """Database holding two tenants' agents and sessions."""
    async with database.session() as session:
        session.add_all([
            Agent(
                id=SUPPORT_AGENT_ID,
                organization_id=ORG_ID,
                name="Support Bot",
                description="Answers support calls",
                status="active",
            ),
            Agent(
                id=SALES_AGENT_ID,
                organization_id=ORG_ID,
                name="Sales Bot",
                description="Books demos",
                status="active",
            ),
            Agent(
                id=RETIRED_AGENT_ID,
                organization_id=ORG_ID,
                name="Retired Bot",
                is_deleted=True,
            ),
            Agent(
                id="agt_foreign",
                organization_id=OTHER_ORG_ID,
                name="Foreign Bot",
            ),
        ])
        await session.flush()

        session.add_all([
            CallSession(
                id="ses_1",
                organization_id=ORG_ID,
                agent_id=SUPPORT_AGENT_ID,
                customer_id="cust_1",
                type="voice",
                status="completed",
                duration_seconds=120,
                start_time=datetime(2024, 1, 1, 9, 0, 0),
                end_time=datetime(2024, 1, 1, 9, 2, 0),
                satisfaction=4,
            ),
            CallSession(
                id="ses_2",
                organization_id=ORG_ID,
                agent_id=SUPPORT_AGENT_ID,
                customer_id="cust_2",
                type="voice",
                status="completed",
                duration_seconds=180,
                start_time=datetime(2024, 1, 1, 15, 30, 0),
                end_time=datetime(2024, 1, 1, 15, 33, 0),
                satisfaction=5,
            ),
            CallSession(
                id="ses_3",
                organization_id=ORG_ID,
                agent_id=SALES_AGENT_ID,
                customer_id="cust_3",
                type="chat",
                status="failed",
                duration_seconds=45,
                start_time=datetime(2024, 1, 2, 10, 0, 0),
            ),
            CallSession(
                id="ses_4",
                organization_id=ORG_ID,
                agent_id=SUPPORT_AGENT_ID,
                customer_id="cust_4",
                type="voice",
                status="in_progress",
                duration_seconds=0,
                start_time=datetime(2024, 1, 3, 23, 59, 59),
            ),
            CallSession(
                id="ses_foreign",
                organization_id=OTHER_ORG_ID,
                agent_id="agt_foreign",
                type="voice",
                status="completed",
                duration_seconds=300,
                start_time=datetime(2024, 1, 1, 10, 0, 0),
            ),
        ])

    return database


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def settings(database_url: str) -> Settings:
    """Test application settings."""
    return Settings(
        environment="test",
        database_url=database_url,
        docs_enabled=False,
        log_format="console",
        log_level="warning",
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Create test FastAPI application."""
    from callboard_core.api.app import create_app

    return create_app(settings)


@pytest_asyncio.fixture
async def client(app: FastAPI, seeded_database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client authenticated as the test organization."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        ac.headers["X-Organization-ID"] = ORG_ID
        yield ac
