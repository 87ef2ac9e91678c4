"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode: create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.
connect_db() is called once from the app lifespan: it creates the tables and
retries the first connection exactly once before giving up.
"""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todoapp.config import settings
from todoapp.db.models import Base

logger = structlog.get_logger()


def build_engine(url: str) -> AsyncEngine:
    """Create an engine, sizing the pool only for server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.debug)
    # Connection pool: min 5, max 20 connections.
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=15,
    )


engine = build_engine(settings.database_url)

# Session factory: each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency. Yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables(target: AsyncEngine) -> None:
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def connect_db(target: AsyncEngine = engine) -> None:
    """Open the first connection and create tables, retrying once.

    Raises the retry's exception if the second attempt also fails.
    """
    try:
        await create_tables(target)
    except Exception as e:
        logger.warning("db.connect_failed", error=str(e), retrying=True)
        await asyncio.sleep(settings.db_connect_retry_delay_seconds)
        try:
            await create_tables(target)
        except Exception as retry_error:
            logger.error("db.connect_retry_failed", error=str(retry_error))
            raise
        logger.info("db.connected_on_retry")
        return
    logger.info("db.connected")
