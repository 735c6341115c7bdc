"""Database connection and session management.

Async SQLAlchemy engine plus session factory, shared by the audit store.

Following hexagonal architecture:
- This is an infrastructure concern
- Provides sessions to adapter implementations
- Handles transaction boundaries and connection pooling
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def _engine_options(
    database_url: str, pool_size: int, max_overflow: int
) -> dict[str, Any]:
    """Backend-specific engine options.

    SQLite (aiosqlite) manages its own pool and rejects sizing arguments.
    """
    if database_url.startswith("sqlite"):
        return {}
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
    }
    if "postgresql" in database_url:
        options["connect_args"] = {
            "server_settings": {"jit": "off"},
            "command_timeout": 60,
            "timeout": 30,
        }
    return options


class Database:
    """Database connection and session management.

    Usage:
        db = Database("sqlite+aiosqlite:///:memory:")
        await db.create_all()
        async with db.get_session() as session:
            store = SQLAlchemyAuditAdapter(session)
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 0,
    ) -> None:
        """Initialize database with connection parameters.

        Args:
            database_url: Async database URL (sqlite+aiosqlite://, postgresql+asyncpg://).
            echo: If True, log all SQL statements.
            pool_size: Connections kept in pool (ignored for SQLite).
            max_overflow: Overflow connections above pool_size (ignored for SQLite).
        """
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            **_engine_options(database_url, pool_size, max_overflow),
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session that rolls back on error and always closes.

        Adapters commit their own writes; nothing is committed here.
        """
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_all(self) -> None:
        """Create any missing tables defined in the models.

        Idempotent: existing tables are left untouched. Called at application
        startup and by tests.
        """
        from src.infrastructure.persistence.base import BaseModel
        from src.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)

    async def drop_all(self) -> None:
        """Drop all tables. Deletes all data: tests only."""
        from src.infrastructure.persistence.base import BaseModel

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of all pooled connections."""
        await self.engine.dispose()

    async def check_connection(self) -> bool:
        """Check if database connection is working."""
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
                return True
        except (SQLAlchemyError, OSError):
            return False
