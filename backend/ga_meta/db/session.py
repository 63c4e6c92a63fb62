"""
Database session management.

Provides async session factory and dependency injection for FastAPI.
"""
from collections.abc import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ga_meta.core.config import settings
from ga_meta.db.base import Base

logger = structlog.get_logger()


engine = create_async_engine(
    settings.database_url_computed,
    echo=False,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,
    max_overflow=20,
    pool_recycle=1800,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides an async database session.

    Usage:
        @router.get("/events")
        async def list_events(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(
                "Database session error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise


async def create_tables(target: AsyncEngine | None = None) -> None:
    """Create all tables and unique constraints if they do not exist."""
    # Importing models registers them on Base.metadata
    import ga_meta.models  # noqa: F401

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
