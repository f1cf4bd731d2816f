"""
Database Models

SQLAlchemy ORM models read by the analytics core. Rows are written by
the agent management and call handling services.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TimestampMixin


# =============================================================================
# Agent Models
# =============================================================================


class Agent(Base, TimestampMixin, SoftDeleteMixin):
    """AI voice agent model."""

    __tablename__ = "agents"

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="inactive")

    # Relationships
    sessions = relationship("CallSession", back_populates="agent")

    __table_args__ = (
        Index("ix_agents_organization_id", "organization_id"),
    )


# =============================================================================
# Session Models
# =============================================================================


class CallSession(Base, TimestampMixin):
    """A single voice or chat interaction handled by an agent."""

    __tablename__ = "sessions"

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False)
    agent_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
    )
    customer_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    type: Mapped[str] = mapped_column(String(50), nullable=False, default="voice")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="in_progress")

    # Timing
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Content
    transcript: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    satisfaction: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Relationships
    agent = relationship("Agent", back_populates="sessions")

    __table_args__ = (
        CheckConstraint("duration_seconds >= 0", name="ck_sessions_duration_non_negative"),
        CheckConstraint(
            "satisfaction IS NULL OR (satisfaction >= 1 AND satisfaction <= 5)",
            name="ck_sessions_satisfaction_range",
        ),
        Index("ix_sessions_org_start_time", "organization_id", "start_time"),
        Index("ix_sessions_agent_id", "agent_id"),
        Index("ix_sessions_status", "status"),
        Index("ix_sessions_customer_id", "customer_id"),
    )


__all__ = [
    "Agent",
    "CallSession",
]
