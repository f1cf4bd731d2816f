"""
Database Repositories

Repository pattern implementation for the analytics read path.
"""

from typing import Generic, List, Optional, Type, TypeVar

import structlog
from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..analytics.base import AgentProfile, SessionFilter, SessionRecord, SessionStatus
from ..analytics.errors import RepositoryError
from ..analytics.store import SessionRepository
from .base import Base
from .models import Agent, CallSession


logger = structlog.get_logger(__name__)


# =============================================================================
# Generic Type Variable
# =============================================================================


ModelType = TypeVar("ModelType", bound=Base)


# =============================================================================
# Base Repository
# =============================================================================


class BaseRepository(Generic[ModelType]):
    """Repository bound to one model and one session."""

    model: Type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session


# =============================================================================
# Agent Repository
# =============================================================================


class AgentRepository(BaseRepository[Agent]):
    """Repository for Agent entities."""

    model = Agent

    async def get_for_organization(
        self,
        organization_id: str,
        agent_id: str,
    ) -> Optional[Agent]:
        """Get a non-deleted agent owned by the organization."""
        result = await self.session.execute(
            select(Agent).where(
                and_(
                    Agent.id == agent_id,
                    Agent.organization_id == organization_id,
                    Agent.is_deleted == False,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_by_organization(self, organization_id: str) -> List[Agent]:
        """List non-deleted agents of an organization."""
        result = await self.session.execute(
            select(Agent)
            .where(
                and_(
                    Agent.organization_id == organization_id,
                    Agent.is_deleted == False,
                )
            )
            .order_by(Agent.name)
        )
        return list(result.scalars().all())


# =============================================================================
# Call Session Repository
# =============================================================================


class CallSessionRepository(BaseRepository[CallSession]):
    """Repository for CallSession entities."""

    model = CallSession

    async def list_in_window(self, session_filter: SessionFilter) -> List[CallSession]:
        """List sessions started inside the (inclusive) filter window."""
        window = session_filter.window
        conditions = [
            CallSession.organization_id == session_filter.organization_id,
            CallSession.start_time >= window.start,
            CallSession.start_time <= window.end,
        ]
        if session_filter.agent_id:
            conditions.append(CallSession.agent_id == session_filter.agent_id)

        result = await self.session.execute(
            select(CallSession)
            .where(and_(*conditions))
            .order_by(CallSession.start_time)
        )
        return list(result.scalars().all())

    async def list_recent_by_agent(
        self,
        organization_id: str,
        agent_id: str,
        limit: int = 10,
    ) -> List[CallSession]:
        """List an agent's latest sessions, newest first."""
        result = await self.session.execute(
            select(CallSession)
            .where(
                and_(
                    CallSession.organization_id == organization_id,
                    CallSession.agent_id == agent_id,
                )
            )
            .order_by(CallSession.start_time.desc())
            .limit(limit)
        )
        return list(result.scalars().all())


# =============================================================================
# Analytics Store
# =============================================================================


def to_session_record(row: CallSession) -> Optional[SessionRecord]:
    """Convert an ORM row to the analytics record type."""
    try:
        status = SessionStatus(row.status)
    except ValueError:
        logger.warning("unknown_session_status", session_id=row.id, status=row.status)
        return None

    return SessionRecord(
        session_id=row.id,
        agent_id=row.agent_id,
        status=status,
        start_time=row.start_time,
        duration_seconds=row.duration_seconds or 0,
        customer_id=row.customer_id,
        type=row.type,
        end_time=row.end_time,
        transcript=row.transcript,
        satisfaction=row.satisfaction,
    )


def to_agent_profile(row: Agent) -> AgentProfile:
    return AgentProfile(
        agent_id=row.id,
        name=row.name,
        description=row.description,
        status=row.status,
    )


class SQLSessionRepository(SessionRepository):
    """
    SessionRepository backed by an SQLAlchemy async session.

    Storage failures surface as RepositoryError; the original exception
    is logged here and kept on the error for the top-level handler.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.agents = AgentRepository(session)
        self.sessions = CallSessionRepository(session)

    async def query(self, session_filter: SessionFilter) -> List[SessionRecord]:
        try:
            rows = await self.sessions.list_in_window(session_filter)
        except SQLAlchemyError as e:
            raise self._failure("query_sessions", e) from e
        return self._records(rows)

    async def get_agent(
        self,
        organization_id: str,
        agent_id: str,
    ) -> Optional[AgentProfile]:
        try:
            row = await self.agents.get_for_organization(organization_id, agent_id)
        except SQLAlchemyError as e:
            raise self._failure("get_agent", e) from e
        return to_agent_profile(row) if row else None

    async def list_agents(self, organization_id: str) -> List[AgentProfile]:
        try:
            rows = await self.agents.list_by_organization(organization_id)
        except SQLAlchemyError as e:
            raise self._failure("list_agents", e) from e
        return [to_agent_profile(row) for row in rows]

    async def recent_sessions(
        self,
        organization_id: str,
        agent_id: str,
        limit: int,
    ) -> List[SessionRecord]:
        try:
            rows = await self.sessions.list_recent_by_agent(organization_id, agent_id, limit)
        except SQLAlchemyError as e:
            raise self._failure("recent_sessions", e) from e
        return self._records(rows)

    @staticmethod
    def _records(rows: List[CallSession]) -> List[SessionRecord]:
        records = (to_session_record(row) for row in rows)
        return [record for record in records if record is not None]

    @staticmethod
    def _failure(operation: str, error: SQLAlchemyError) -> RepositoryError:
        logger.exception("repository_failure", operation=operation, error=str(error))
        return RepositoryError(operation, cause=error)


__all__ = [
    "BaseRepository",
    "AgentRepository",
    "CallSessionRepository",
    "SQLSessionRepository",
    "to_session_record",
    "to_agent_profile",
]
