"""
Date Range Resolution

Turns optional caller-supplied bounds into a concrete, validated
aggregation window.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional, Union

from .base import AggregationWindow
from .errors import InvalidDateError, InvalidRangeError


RawDate = Union[str, date, datetime, None]


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_date(value: RawDate, field: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime.

    Date-only values resolve to midnight UTC. Blank strings count as
    absent.

    Raises:
        InvalidDateError: if the value is present but malformed
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if not isinstance(value, str):
        raise InvalidDateError(field, value)

    text = value.strip()
    if not text:
        return None

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidDateError(field, value) from None
    return to_naive_utc(parsed)


class DateRangeResolver:
    """Resolves query bounds into an AggregationWindow."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utcnow

    def now(self) -> datetime:
        """Current reference time of this resolver."""
        return self._clock()

    def resolve(
        self,
        raw_from: RawDate = None,
        raw_to: RawDate = None,
        default_span_days: int = 7,
        agent_filter: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AggregationWindow:
        """
        Resolve a window.

        Args:
            raw_from: Lower bound; defaults to ``now - default_span_days``
            raw_to: Upper bound; defaults to ``now``
            default_span_days: Span used when ``raw_from`` is absent
            agent_filter: Optional agent scope carried into the window
            now: Reference time (defaults to the resolver clock)

        Raises:
            InvalidDateError: a bound is malformed
            InvalidRangeError: the resolved start is after the end
        """
        if default_span_days <= 0:
            raise ValueError("default_span_days must be positive")

        now = to_naive_utc(now) if now else self._clock()

        start = parse_date(raw_from, "date_from")
        end = parse_date(raw_to, "date_to")

        if end is None:
            end = now
        if start is None:
            start = now - timedelta(days=default_span_days)

        if start > end:
            raise InvalidRangeError(start, end)

        return AggregationWindow(start=start, end=end, agent_filter=agent_filter)


__all__ = [
    "DateRangeResolver",
    "parse_date",
    "to_naive_utc",
    "utcnow",
]
