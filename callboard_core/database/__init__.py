"""
Database Module

SQLAlchemy models, connection management and repositories for the
session store.
"""

from .base import (
    Base,
    DatabaseManager,
    close_database,
    get_database,
    init_database,
    to_async_url,
)
from .models import Agent, CallSession
from .repositories import (
    AgentRepository,
    CallSessionRepository,
    SQLSessionRepository,
)


__all__ = [
    "Base",
    "DatabaseManager",
    "init_database",
    "close_database",
    "get_database",
    "to_async_url",
    "Agent",
    "CallSession",
    "AgentRepository",
    "CallSessionRepository",
    "SQLSessionRepository",
]
