"""
Session Store Interface

Read-only query capability the analytics core consumes. The SQL
implementation lives in ``callboard_core.database.repositories``.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .base import AgentProfile, SessionFilter, SessionRecord


class SessionRepository(ABC):
    """Read-only access to session records and agent descriptions."""

    @abstractmethod
    async def query(self, session_filter: SessionFilter) -> List[SessionRecord]:
        """
        Fetch sessions whose start time lies inside the filter window.

        Both window bounds are inclusive. When the window carries an
        agent filter only that agent's sessions are returned.
        """

    @abstractmethod
    async def get_agent(
        self,
        organization_id: str,
        agent_id: str,
    ) -> Optional[AgentProfile]:
        """Return the agent, or None if it does not exist for the tenant."""

    @abstractmethod
    async def list_agents(self, organization_id: str) -> List[AgentProfile]:
        """Return every active agent of the tenant."""

    @abstractmethod
    async def recent_sessions(
        self,
        organization_id: str,
        agent_id: str,
        limit: int,
    ) -> List[SessionRecord]:
        """Return up to ``limit`` sessions of an agent, newest first."""


__all__ = ["SessionRepository"]
