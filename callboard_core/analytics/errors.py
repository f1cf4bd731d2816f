"""
Analytics Errors

Exception taxonomy raised by the analytics core. Mapping to HTTP
status codes happens once, in the API layer.
"""

from typing import Any, Dict, Optional


class AnalyticsError(Exception):
    """Base exception for analytics failures."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.field = field
        self.details = details
        super().__init__(message)


class InvalidDateError(AnalyticsError):
    """A supplied date bound could not be parsed."""

    def __init__(self, field: str, value: Any):
        super().__init__(
            message=f"Invalid date for '{field}': expected ISO-8601 date or datetime",
            field=field,
            details={"field": field, "value": value},
        )


class InvalidRangeError(AnalyticsError):
    """The resolved window starts after it ends."""

    def __init__(self, start: Any, end: Any):
        super().__init__(
            message="date_from must not be later than date_to",
            field="date_from",
            details={"start": str(start), "end": str(end)},
        )


class AgentNotFoundError(AnalyticsError):
    """An agent reference did not resolve."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(
            message=f"Agent with ID '{agent_id}' not found",
            details={"resource_type": "agent", "resource_id": agent_id},
        )


class RepositoryError(AnalyticsError):
    """The session store failed while serving a query."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(message=f"Repository operation '{operation}' failed")


__all__ = [
    "AnalyticsError",
    "InvalidDateError",
    "InvalidRangeError",
    "AgentNotFoundError",
    "RepositoryError",
]
