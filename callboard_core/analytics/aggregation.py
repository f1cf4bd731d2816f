"""
Aggregation Engine Module

Pure functions that derive key metrics and per-date trend series from
an already-windowed sequence of sessions. Nothing here performs I/O or
mutates its input.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from .base import (
    AgentPerformance,
    AgentProfile,
    AggregationWindow,
    CallVolumePoint,
    DurationPoint,
    KeyMetrics,
    SessionRecord,
    SessionStatus,
    StatusCount,
    SuccessRatePoint,
)


P = TypeVar("P")


# =============================================================================
# Helpers
# =============================================================================


def safe_rate(successful: int, total: int) -> float:
    """Percentage of ``successful`` in ``total``, one decimal, 0 when empty."""
    if total <= 0:
        return 0.0
    return round(successful / total * 100, 1)


def average_completed_duration(sessions: Iterable[SessionRecord]) -> int:
    """Mean duration over completed sessions, rounded to whole seconds."""
    durations = [s.duration_seconds for s in sessions if s.is_completed]
    if not durations:
        return 0
    return round(sum(durations) / len(durations))


def average_satisfaction(sessions: Iterable[SessionRecord]) -> Optional[float]:
    ratings = [s.satisfaction for s in sessions if s.satisfaction is not None]
    if not ratings:
        return None
    return round(sum(ratings) / len(ratings), 1)


def group_by_date(sessions: Iterable[SessionRecord]) -> Dict[date, List[SessionRecord]]:
    """Group sessions into UTC calendar-date buckets keyed by start time."""
    buckets: Dict[date, List[SessionRecord]] = defaultdict(list)
    for session in sessions:
        buckets[session.bucket].append(session)
    return buckets


def _count(sessions: Iterable[SessionRecord], status: SessionStatus) -> int:
    return sum(1 for s in sessions if s.status == status)


# =============================================================================
# Key Metrics
# =============================================================================


def compute_key_metrics(sessions: Sequence[SessionRecord]) -> KeyMetrics:
    """Compute the scalar summary for a set of sessions."""
    total = len(sessions)
    if total == 0:
        return KeyMetrics()

    successful = _count(sessions, SessionStatus.COMPLETED)
    start_times = [s.start_time for s in sessions]

    return KeyMetrics(
        total_calls=total,
        successful_calls=successful,
        failed_calls=_count(sessions, SessionStatus.FAILED),
        success_rate=safe_rate(successful, total),
        average_duration=average_completed_duration(sessions),
        average_satisfaction=average_satisfaction(sessions),
        first_call=min(start_times),
        last_call=max(start_times),
    )


# =============================================================================
# Trend Series
# =============================================================================


def compute_call_volume_series(sessions: Sequence[SessionRecord]) -> List[CallVolumePoint]:
    """Sessions per date, ascending. Dates without sessions are omitted."""
    return [
        CallVolumePoint(
            date=day,
            calls=len(bucket),
            successful=_count(bucket, SessionStatus.COMPLETED),
        )
        for day, bucket in sorted(group_by_date(sessions).items())
    ]


def compute_duration_trend(sessions: Sequence[SessionRecord]) -> List[DurationPoint]:
    """Average completed-session duration per date, ascending."""
    return [
        DurationPoint(date=day, average_duration=average_completed_duration(bucket))
        for day, bucket in sorted(group_by_date(sessions).items())
    ]


def compute_success_rate_trend(sessions: Sequence[SessionRecord]) -> List[SuccessRatePoint]:
    """Success rate per date, ascending."""
    points = []
    for day, bucket in sorted(group_by_date(sessions).items()):
        successful = _count(bucket, SessionStatus.COMPLETED)
        points.append(
            SuccessRatePoint(
                date=day,
                success_rate=safe_rate(successful, len(bucket)),
                total_calls=len(bucket),
                successful_calls=successful,
            )
        )
    return points


def fill_gaps(
    series: Sequence[P],
    window: AggregationWindow,
    factory: Callable[[date], P],
) -> List[P]:
    """
    Return a dense copy of ``series`` with one point per date in the window.

    Missing dates are produced by ``factory``. Points must expose a
    ``date`` attribute.
    """
    by_date = {point.date: point for point in series}
    dense: List[P] = []
    day = window.start.date()
    last = window.end.date()
    while day <= last:
        dense.append(by_date[day] if day in by_date else factory(day))
        day += timedelta(days=1)
    return dense


# =============================================================================
# Breakdowns
# =============================================================================


def compute_status_distribution(sessions: Sequence[SessionRecord]) -> List[StatusCount]:
    """Count and share of each status present, in lifecycle order."""
    total = len(sessions)
    counts = {status: _count(sessions, status) for status in SessionStatus}
    return [
        StatusCount(status=status, count=count, percentage=safe_rate(count, total))
        for status, count in counts.items()
        if count > 0
    ]


def compute_agent_performance(
    sessions: Sequence[SessionRecord],
    agents: Sequence[AgentProfile],
) -> List[AgentPerformance]:
    """
    Per-agent metrics for every known agent.

    Agents without sessions are reported with zero values. Sessions
    whose agent is not in ``agents`` are ignored.
    """
    by_agent: Dict[str, List[SessionRecord]] = defaultdict(list)
    for session in sessions:
        if session.agent_id is not None:
            by_agent[session.agent_id].append(session)

    results = []
    for agent in agents:
        owned = by_agent.get(agent.agent_id, [])
        successful = _count(owned, SessionStatus.COMPLETED)
        results.append(
            AgentPerformance(
                agent_id=agent.agent_id,
                name=agent.name,
                total_calls=len(owned),
                successful_calls=successful,
                success_rate=safe_rate(successful, len(owned)),
                average_duration=average_completed_duration(owned),
                average_satisfaction=average_satisfaction(owned),
            )
        )

    results.sort(key=lambda p: (-p.total_calls, p.name, p.agent_id))
    return results


class AggregationEngine:
    """
    Computes every derived view of a session snapshot.

    Thin object wrapper over the module functions. Trend series omit
    dates without sessions unless ``zero_fill`` is set, in which case
    every date of the window gets a point.
    """

    def __init__(self, zero_fill: bool = False):
        self.zero_fill = zero_fill

    def key_metrics(self, sessions: Sequence[SessionRecord]) -> KeyMetrics:
        return compute_key_metrics(sessions)

    def call_volume(
        self,
        sessions: Sequence[SessionRecord],
        window: Optional[AggregationWindow] = None,
    ) -> List[CallVolumePoint]:
        series = compute_call_volume_series(sessions)
        if self.zero_fill and window is not None:
            series = fill_gaps(series, window, lambda d: CallVolumePoint(date=d))
        return series

    def duration_trend(
        self,
        sessions: Sequence[SessionRecord],
        window: Optional[AggregationWindow] = None,
    ) -> List[DurationPoint]:
        series = compute_duration_trend(sessions)
        if self.zero_fill and window is not None:
            series = fill_gaps(series, window, lambda d: DurationPoint(date=d))
        return series

    def success_rate_trend(
        self,
        sessions: Sequence[SessionRecord],
        window: Optional[AggregationWindow] = None,
    ) -> List[SuccessRatePoint]:
        series = compute_success_rate_trend(sessions)
        if self.zero_fill and window is not None:
            series = fill_gaps(series, window, lambda d: SuccessRatePoint(date=d))
        return series

    def status_distribution(self, sessions: Sequence[SessionRecord]) -> List[StatusCount]:
        return compute_status_distribution(sessions)

    def agent_performance(
        self,
        sessions: Sequence[SessionRecord],
        agents: Sequence[AgentProfile],
    ) -> List[AgentPerformance]:
        return compute_agent_performance(sessions, agents)


__all__ = [
    "safe_rate",
    "average_completed_duration",
    "average_satisfaction",
    "group_by_date",
    "compute_key_metrics",
    "compute_call_volume_series",
    "compute_duration_trend",
    "compute_success_rate_trend",
    "compute_status_distribution",
    "compute_agent_performance",
    "fill_gaps",
    "AggregationEngine",
]
