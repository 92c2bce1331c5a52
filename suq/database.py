"""Database connection and session management for users and sessions."""
import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from suq.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(settings: Settings) -> AsyncEngine:
    """
    Create the engine holding authentication records.

    DATABASE_URL must name an async driver (``postgresql+asyncpg://``,
    ``sqlite+aiosqlite://``). Falls back to a process-local in-memory
    SQLite database when it is not configured.
    """
    if not settings.database_url:
        logger.warning("DATABASE_URL is not defined; keeping auth records in memory")
        return create_async_engine(
            "sqlite+aiosqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database sessions."""
    async with request.app.state.session_factory() as session:
        yield session
