"""
Database Base Module

Declarative base, mixins and the async engine for the session store.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from sqlalchemy import Boolean, DateTime, String, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_async_url(database_url: str) -> str:
    """Swap a plain driver scheme for its async counterpart."""
    for plain, async_scheme in ASYNC_DRIVERS.items():
        if database_url.startswith(plain):
            return async_scheme + database_url[len(plain):]
    return database_url


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow, nullable=False
    )


class SoftDeleteMixin:
    """Rows are hidden from analytics once flagged; nothing here deletes them."""

    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


# =============================================================================
# Engine
# =============================================================================


class DatabaseManager:
    """
    Owns the async engine and hands out transactional sessions.

    Args:
        database_url: Connection URL; plain postgres/sqlite schemes are
            upgraded to asyncpg/aiosqlite
        pool_size: Pool size for server databases (ignored for SQLite)
        max_overflow: Extra connections beyond ``pool_size``
        echo: Log emitted SQL
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.url = to_async_url(database_url)

        options = {"echo": echo}
        if not self.is_sqlite:
            options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )

        self.engine = create_async_engine(self.url, **options)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session committed on success and rolled back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """True when a trivial query round-trips."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()


# =============================================================================
# Process-wide Instance
# =============================================================================


_database: Optional[DatabaseManager] = None


def get_database() -> DatabaseManager:
    if _database is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _database


def init_database(database_url: str, **kwargs) -> DatabaseManager:
    global _database
    _database = DatabaseManager(database_url, **kwargs)
    return _database


async def close_database() -> None:
    global _database
    if _database is not None:
        await _database.close()
        _database = None


__all__ = [
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    "DatabaseManager",
    "to_async_url",
    "get_database",
    "init_database",
    "close_database",
]
