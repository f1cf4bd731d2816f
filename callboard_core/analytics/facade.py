"""
Analytics Facade

Orchestrates window resolution, session retrieval and aggregation into
the payloads served by the analytics endpoints.
"""

from dataclasses import replace
from datetime import timedelta
from typing import List, Optional

import structlog

from .aggregation import AggregationEngine, average_completed_duration
from .base import (
    AgentAnalyticsReport,
    AggregationWindow,
    AnalyticsReport,
    CallerContext,
    RealtimeMetrics,
    SessionFilter,
    SessionRecord,
    SessionStatus,
)
from .date_range import DateRangeResolver, RawDate
from .errors import AgentNotFoundError
from .recent import RecentActivityFetcher
from .store import SessionRepository


logger = structlog.get_logger(__name__)

GLOBAL_DEFAULT_DAYS = 7
AGENT_DEFAULT_DAYS = 30
RECENT_CALLS_LIMIT = 10

# Agent filter value the dashboard sends for "every agent".
ALL_AGENTS = "all"


def normalize_agent_filter(agent_id: Optional[str]) -> Optional[str]:
    if agent_id is None:
        return None
    agent_id = agent_id.strip()
    if not agent_id or agent_id == ALL_AGENTS:
        return None
    return agent_id


class AnalyticsFacade:
    """
    Entry point for analytics queries.

    Every report is computed from a single session snapshot so that the
    key metrics and all series in one response agree with each other.
    """

    def __init__(
        self,
        repository: SessionRepository,
        resolver: Optional[DateRangeResolver] = None,
        engine: Optional[AggregationEngine] = None,
        global_default_days: int = GLOBAL_DEFAULT_DAYS,
        agent_default_days: int = AGENT_DEFAULT_DAYS,
        recent_calls_limit: int = RECENT_CALLS_LIMIT,
    ):
        self.repository = repository
        self.resolver = resolver or DateRangeResolver()
        self.engine = engine or AggregationEngine()
        self.recent = RecentActivityFetcher(repository)
        self.global_default_days = global_default_days
        self.agent_default_days = agent_default_days
        self.recent_calls_limit = recent_calls_limit
        self.logger = logger.bind(service="analytics")

    async def get_analytics(
        self,
        caller: CallerContext,
        date_from: RawDate = None,
        date_to: RawDate = None,
        agent_id: Optional[str] = None,
    ) -> AnalyticsReport:
        """Analytics for the whole tenant, optionally scoped to one agent."""
        window = self.resolver.resolve(
            date_from,
            date_to,
            default_span_days=self.global_default_days,
            agent_filter=normalize_agent_filter(agent_id),
        )

        sessions = await self._fetch(caller, window)
        agents = await self.repository.list_agents(caller.organization_id)

        report = self._build(AnalyticsReport, window, sessions)

        # agent breakdown always spans every agent
        tenant_sessions = sessions
        if window.agent_filter is not None:
            tenant_sessions = await self._fetch(caller, replace(window, agent_filter=None))
        report.agent_performance = self.engine.agent_performance(tenant_sessions, agents)

        self.logger.info(
            "analytics_computed",
            organization_id=caller.organization_id,
            agent_filter=window.agent_filter,
            total_calls=report.metrics.total_calls,
        )
        return report

    async def get_agent_analytics(
        self,
        caller: CallerContext,
        agent_id: str,
        date_from: RawDate = None,
        date_to: RawDate = None,
    ) -> AgentAnalyticsReport:
        """
        Analytics for a single agent.

        Raises:
            AgentNotFoundError: the agent does not exist for the tenant
        """
        window = self.resolver.resolve(
            date_from,
            date_to,
            default_span_days=self.agent_default_days,
            agent_filter=agent_id,
        )

        agent = await self.repository.get_agent(caller.organization_id, agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)

        sessions = await self._fetch(caller, window)

        report = self._build(AgentAnalyticsReport, window, sessions)
        report.agent = agent
        report.recent_calls = await self.recent.fetch_for_agent(
            caller.organization_id, agent, self.recent_calls_limit
        )

        self.logger.info(
            "agent_analytics_computed",
            organization_id=caller.organization_id,
            agent_id=agent_id,
            total_calls=report.metrics.total_calls,
        )
        return report

    async def get_realtime(self, caller: CallerContext) -> RealtimeMetrics:
        """Counters for the last hour and the last 24 hours."""
        now = self.resolver.now()
        day_window = AggregationWindow(start=now - timedelta(hours=24), end=now)
        hour_start = now - timedelta(hours=1)

        sessions = await self._fetch(caller, day_window)
        last_hour = [s for s in sessions if s.start_time >= hour_start]

        return RealtimeMetrics(
            calls_this_hour=len(last_hour),
            active_calls=sum(1 for s in last_hour if s.status == SessionStatus.IN_PROGRESS),
            calls_last_24h=len(sessions),
            completed_last_24h=sum(1 for s in sessions if s.is_completed),
            average_duration_last_24h=average_completed_duration(sessions),
        )

    async def _fetch(
        self,
        caller: CallerContext,
        window: AggregationWindow,
    ) -> List[SessionRecord]:
        session_filter = SessionFilter(
            organization_id=caller.organization_id,
            window=window,
        )
        return await self.repository.query(session_filter)

    def _build(self, report_cls, window, sessions):
        engine = self.engine
        return report_cls(
            window=window,
            metrics=engine.key_metrics(sessions),
            call_volume=engine.call_volume(sessions, window),
            duration_trends=engine.duration_trend(sessions, window),
            success_rate_trends=engine.success_rate_trend(sessions, window),
            status_distribution=engine.status_distribution(sessions),
        )


__all__ = [
    "AnalyticsFacade",
    "normalize_agent_filter",
    "GLOBAL_DEFAULT_DAYS",
    "AGENT_DEFAULT_DAYS",
    "RECENT_CALLS_LIMIT",
]
