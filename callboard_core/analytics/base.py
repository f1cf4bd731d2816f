"""
Analytics Base Types Module

This module defines the core types and data structures used by the
session analytics system.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class SessionStatus(str, Enum):
    """Lifecycle status of a call session."""

    INITIATED = "initiated"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    ABANDONED = "abandoned"


class SessionType(str, Enum):
    """Interaction channel of a session."""

    VOICE = "voice"
    CHAT = "chat"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# Session Records
# =============================================================================


@dataclass(frozen=True)
class SessionRecord:
    """
    Read-only view of one logged interaction.

    Records are produced by the repository layer and never mutated by
    the analytics core.
    """

    session_id: str
    agent_id: Optional[str]
    status: SessionStatus
    start_time: datetime
    duration_seconds: int = 0
    customer_id: Optional[str] = None
    type: str = SessionType.VOICE.value
    end_time: Optional[datetime] = None
    transcript: Optional[str] = None
    satisfaction: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    @property
    def bucket(self) -> date:
        """Calendar date (UTC) the session is grouped under."""
        return self.start_time.date()


@dataclass(frozen=True)
class AgentProfile:
    """Descriptive record of a voice agent."""

    agent_id: str
    name: str
    description: Optional[str] = None
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.agent_id,
            "name": self.name,
            "description": self.description,
        }


# =============================================================================
# Query Types
# =============================================================================


@dataclass(frozen=True)
class AggregationWindow:
    """Inclusive time range over which metrics are computed."""

    start: datetime
    end: datetime
    agent_filter: Optional[str] = None

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }


@dataclass(frozen=True)
class SessionFilter:
    """
    Typed predicate handed to the session repository.

    The repository translates it into its own query language; the
    analytics core never builds query strings.
    """

    organization_id: str
    window: AggregationWindow

    @property
    def agent_id(self) -> Optional[str]:
        return self.window.agent_filter


@dataclass(frozen=True)
class CallerContext:
    """Identity of the tenant and user issuing an analytics query."""

    organization_id: str
    user_id: Optional[str] = None


# =============================================================================
# Aggregation Results
# =============================================================================


@dataclass
class KeyMetrics:
    """Scalar summary of a window."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    success_rate: float = 0.0
    average_duration: int = 0
    average_satisfaction: Optional[float] = None
    first_call: Optional[datetime] = None
    last_call: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCalls": self.total_calls,
            "successfulCalls": self.successful_calls,
            "failedCalls": self.failed_calls,
            "successRate": self.success_rate,
            "averageDuration": self.average_duration,
            "averageSatisfaction": self.average_satisfaction,
            "firstCall": _iso(self.first_call),
            "lastCall": _iso(self.last_call),
        }


@dataclass
class CallVolumePoint:
    """Number of sessions started on one date."""

    date: date
    calls: int = 0
    successful: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "calls": self.calls,
            "successful": self.successful,
        }


@dataclass
class DurationPoint:
    """Average completed-session duration on one date."""

    date: date
    average_duration: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "averageDuration": self.average_duration,
        }


@dataclass
class SuccessRatePoint:
    """Success rate on one date."""

    date: date
    success_rate: float = 0.0
    total_calls: int = 0
    successful_calls: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "successRate": self.success_rate,
            "totalCalls": self.total_calls,
            "successfulCalls": self.successful_calls,
        }


# Pie-chart colors keyed by status
STATUS_COLORS = {
    SessionStatus.COMPLETED: "#10B981",
    SessionStatus.FAILED: "#EF4444",
    SessionStatus.IN_PROGRESS: "#F59E0B",
}
DEFAULT_STATUS_COLOR = "#6B7280"


@dataclass
class StatusCount:
    """
    Share of sessions in one status.

    Serialized as a chart slice: ``name``, ``value`` and ``color`` are
    what the dashboard pie chart reads.
    """

    status: SessionStatus
    count: int = 0
    percentage: float = 0.0

    @property
    def color(self) -> str:
        return STATUS_COLORS.get(self.status, DEFAULT_STATUS_COLOR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.status.value.capitalize(),
            "value": self.count,
            "color": self.color,
            "status": self.status.value,
            "percentage": self.percentage,
        }


@dataclass
class AgentPerformance:
    """Per-agent metrics for a window."""

    agent_id: str
    name: str
    total_calls: int = 0
    successful_calls: int = 0
    success_rate: float = 0.0
    average_duration: int = 0
    average_satisfaction: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agentId": self.agent_id,
            "name": self.name,
            "totalCalls": self.total_calls,
            "successfulCalls": self.successful_calls,
            "successRate": self.success_rate,
            "averageDuration": self.average_duration,
            "averageSatisfaction": self.average_satisfaction,
        }


@dataclass
class RecentSession:
    """A recent session enriched with its agent's display name."""

    session: SessionRecord
    agent_name: str

    def to_dict(self) -> Dict[str, Any]:
        session = self.session
        return {
            "id": session.session_id,
            "agentId": session.agent_id,
            "agentName": self.agent_name,
            "customerId": session.customer_id,
            "type": session.type,
            "status": session.status.value,
            "duration": session.duration_seconds,
            "startTime": _iso(session.start_time),
            "endTime": _iso(session.end_time),
            "satisfaction": session.satisfaction,
        }


# =============================================================================
# Reports
# =============================================================================


@dataclass
class AnalyticsReport:
    """Complete analytics payload for one window."""

    window: AggregationWindow
    metrics: KeyMetrics
    call_volume: List[CallVolumePoint] = field(default_factory=list)
    duration_trends: List[DurationPoint] = field(default_factory=list)
    success_rate_trends: List[SuccessRatePoint] = field(default_factory=list)
    status_distribution: List[StatusCount] = field(default_factory=list)
    agent_performance: Optional[List[AgentPerformance]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "dateRange": self.window.to_dict(),
            "metrics": self.metrics.to_dict(),
            "callVolume": [p.to_dict() for p in self.call_volume],
            "durationTrends": [p.to_dict() for p in self.duration_trends],
            "successRateTrends": [p.to_dict() for p in self.success_rate_trends],
            "statusDistribution": [s.to_dict() for s in self.status_distribution],
        }
        if self.agent_performance is not None:
            result["agentPerformance"] = [a.to_dict() for a in self.agent_performance]
        return result


@dataclass
class AgentAnalyticsReport(AnalyticsReport):
    """Analytics payload scoped to a single agent."""

    agent: Optional[AgentProfile] = None
    recent_calls: List[RecentSession] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["agent"] = self.agent.to_dict() if self.agent else None
        result["recentCalls"] = [r.to_dict() for r in self.recent_calls]
        return result


@dataclass
class RealtimeMetrics:
    """Live counters for the dashboard header."""

    calls_this_hour: int = 0
    active_calls: int = 0
    calls_last_24h: int = 0
    completed_last_24h: int = 0
    average_duration_last_24h: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentHour": {
                "calls": self.calls_this_hour,
                "active": self.active_calls,
            },
            "last24Hours": {
                "calls": self.calls_last_24h,
                "completed": self.completed_last_24h,
                "avgDuration": self.average_duration_last_24h,
            },
        }


__all__ = [
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
    "STATUS_COLORS",
    "AgentPerformance",
    "RecentSession",
    "AnalyticsReport",
    "AgentAnalyticsReport",
    "RealtimeMetrics",
]
