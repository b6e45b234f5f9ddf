"""Database session management."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession, async_sessionmaker,
                                    create_async_engine)

from incident_reporter.config import AppSettings
from incident_reporter.db.base import Base


@dataclass(slots=True)
class Database:
    """Manage database engine and session factory lifecycle."""

    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "Database":
        """Build a database instance from application settings."""

        if not settings.database_url:
            raise ValueError("database_url must be configured to use the relational store")
        return cls.from_url(settings.database_url)

    @classmethod
    def from_url(cls, database_url: str) -> "Database":
        """Build a database instance for an explicit SQLAlchemy URL."""

        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            # SQLite will not create missing parent directories for the database file.
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(database_url, future=True)
        session_factory = async_sessionmaker(engine, expire_on_commit=False)
        return cls(engine=engine, session_factory=session_factory)

    async def create_all(self) -> None:
        """Create all database tables defined in the metadata."""

        # Register ORM models on the shared metadata before creating tables.
        from incident_reporter.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Dispose the database engine and release resources."""

        await self.engine.dispose()
