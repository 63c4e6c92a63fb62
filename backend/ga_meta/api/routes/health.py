"""
Health check endpoints.
"""
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta import __version__
from ga_meta.core.config import settings
from ga_meta.core.data_freshness import check_crawl_freshness
from ga_meta.db.session import get_db

router = APIRouter()
logger = structlog.get_logger()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Service status, database connectivity and crawl freshness.

    A stale crawler marks the service degraded; a crawler that has never
    run does not, so a fresh deployment reports healthy.
    """
    crawler = None
    try:
        await db.execute(text("SELECT 1"))
        crawler = await check_crawl_freshness(db)
    except Exception as e:
        logger.warning("Health check: database connection failed", error=str(e))

    db_ok = crawler is not None
    healthy = db_ok and crawler["status"] != "stale"

    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "api": "ok",
            "database": "ok" if db_ok else "error",
            "crawler": crawler["status"] if db_ok else "unknown",
        },
        "crawler": crawler,
    }


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }
