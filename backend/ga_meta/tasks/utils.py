"""
Shared utilities for Celery tasks.

Provides database session management, async execution and the upstream
client bundle used by the crawl and sync jobs.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Coroutine

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ga_meta.core.config import ClientConfig, settings


def create_task_session_maker():
    """
    Create a new async engine and session maker for the current event loop.

    Each task creates its own engine to avoid connection pool conflicts
    between event loops.

    Returns:
        Tuple of (async_sessionmaker, engine). The engine should be disposed
        after use to free resources.
    """
    url = settings.database_url_computed
    connect_args = {}
    if url.startswith("postgresql+asyncpg"):
        connect_args = {
            "server_settings": {
                "idle_in_transaction_session_timeout": "300000",  # 5 min
                "application_name": "ga_meta_worker",
            },
            "command_timeout": 60,
        }

    engine = create_async_engine(
        url,
        echo=settings.api_debug,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    ), engine


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """
    Run async function in sync context (for Celery tasks).

    Args:
        coro: Async coroutine to execute.

    Returns:
        Result of the coroutine execution.
    """
    return asyncio.run(coro)


@asynccontextmanager
async def client_config() -> AsyncIterator[ClientConfig]:
    """
    A ClientConfig built from settings whose HTTP client is closed on exit.

    Example:
        async with client_config() as config:
            omnidex = OmnidexClient(config)
    """
    config = ClientConfig.from_settings()
    try:
        yield config
    finally:
        await config.aclose()
