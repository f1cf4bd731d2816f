"""
Session Analytics Module

Turns a log of call sessions into time-bucketed dashboard metrics:

- Key metrics (totals, success rate, average duration)
- Call volume, duration and success-rate trend series
- Status distribution and agent performance breakdowns
- Recent activity per agent

Example usage:

    from callboard_core.analytics import AnalyticsFacade, CallerContext

    facade = AnalyticsFacade(repository)
    report = await facade.get_analytics(
        CallerContext(organization_id="org_123"),
        date_from="2024-01-01",
        date_to="2024-01-31",
    )
    payload = report.to_dict()
"""

from .base import (
    AgentAnalyticsReport,
    AgentPerformance,
    AgentProfile,
    AggregationWindow,
    AnalyticsReport,
    CallerContext,
    CallVolumePoint,
    DurationPoint,
    KeyMetrics,
    RealtimeMetrics,
    RecentSession,
    SessionFilter,
    SessionRecord,
    SessionStatus,
    SessionType,
    StatusCount,
    SuccessRatePoint,
)
from .errors import (
    AgentNotFoundError,
    AnalyticsError,
    InvalidDateError,
    InvalidRangeError,
    RepositoryError,
)
from .date_range import DateRangeResolver, parse_date
from .aggregation import (
    AggregationEngine,
    compute_agent_performance,
    compute_call_volume_series,
    compute_duration_trend,
    compute_key_metrics,
    compute_status_distribution,
    compute_success_rate_trend,
    fill_gaps,
    safe_rate,
)
from .store import SessionRepository
from .recent import RecentActivityFetcher
from .facade import AnalyticsFacade


__all__ = [
    # Types
    "SessionStatus",
    "SessionType",
    "SessionRecord",
    "AgentProfile",
    "AggregationWindow",
    "SessionFilter",
    "CallerContext",
    "KeyMetrics",
    "CallVolumePoint",
    "DurationPoint",
    "SuccessRatePoint",
    "StatusCount",
    "AgentPerformance",
    "RecentSession",
    "AnalyticsReport",
    "AgentAnalyticsReport",
    "RealtimeMetrics",
    # Errors
    "AnalyticsError",
    "InvalidDateError",
    "InvalidRangeError",
    "AgentNotFoundError",
    "RepositoryError",
    # Components
    "DateRangeResolver",
    "parse_date",
    "AggregationEngine",
    "safe_rate",
    "compute_key_metrics",
    "compute_call_volume_series",
    "compute_duration_trend",
    "compute_success_rate_trend",
    "compute_status_distribution",
    "compute_agent_performance",
    "fill_gaps",
    "SessionRepository",
    "RecentActivityFetcher",
    "AnalyticsFacade",
]
