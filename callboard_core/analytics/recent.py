"""Recent activity for a single agent."""

from typing import List

import structlog

from .base import AgentProfile, RecentSession
from .errors import AgentNotFoundError
from .store import SessionRepository


logger = structlog.get_logger(__name__)


class RecentActivityFetcher:
    """Returns an agent's most recent sessions, newest first."""

    def __init__(self, repository: SessionRepository):
        self.repository = repository

    async def fetch_recent(
        self,
        organization_id: str,
        agent_id: str,
        limit: int = 10,
    ) -> List[RecentSession]:
        """
        Fetch the latest sessions of an agent.

        Raises:
            AgentNotFoundError: the agent does not exist for the tenant
        """
        agent = await self.repository.get_agent(organization_id, agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return await self.fetch_for_agent(organization_id, agent, limit)

    async def fetch_for_agent(
        self,
        organization_id: str,
        agent: AgentProfile,
        limit: int = 10,
    ) -> List[RecentSession]:
        """Fetch the latest sessions of an already resolved agent."""
        if limit <= 0:
            raise ValueError("limit must be positive")

        sessions = await self.repository.recent_sessions(
            organization_id, agent.agent_id, limit
        )
        # store ordering is not relied on
        ordered = sorted(sessions, key=lambda s: s.start_time, reverse=True)[:limit]

        logger.debug(
            "recent_activity_fetched",
            agent_id=agent.agent_id,
            count=len(ordered),
        )
        return [RecentSession(session=s, agent_name=agent.name) for s in ordered]


__all__ = ["RecentActivityFetcher"]
