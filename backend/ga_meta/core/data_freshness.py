"""
Crawl freshness checking.

The incremental crawl runs once a day; if the newest checkpoint is older
than the freshness window the crawler has stopped running or keeps failing.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.core.config import settings
from ga_meta.repositories import CorpusRepository


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_data_fresh(
    latest_time: Optional[datetime],
    freshness_hours: float,
    now: Optional[datetime] = None,
) -> bool:
    """
    Check if data is considered fresh based on the latest timestamp.

    Args:
        latest_time: The timestamp of the most recent data
        freshness_hours: Maximum age in hours for data to be considered fresh
        now: Reference time, defaults to the current UTC time

    Returns:
        True if data is fresh, False if stale or missing
    """
    if latest_time is None:
        return False
    now = now or datetime.now(timezone.utc)
    return now - _as_utc(latest_time) <= timedelta(hours=freshness_hours)


async def check_crawl_freshness(
    db: AsyncSession,
    freshness_hours: Optional[float] = None,
) -> dict:
    """
    Summarize the newest crawl checkpoint.

    Returns:
        {"status": "ok" | "stale" | "never_run", "last_event_id", "total_events",
         "crawl_type", "last_crawl", "age_hours"}; checkpoint fields are None
        when no crawl has run
    """
    hours = freshness_hours if freshness_hours is not None else settings.crawler_freshness_hours
    state = await CorpusRepository(db).latest_checkpoint()

    if state is None:
        return {
            "status": "never_run",
            "last_event_id": None,
            "total_events": None,
            "crawl_type": None,
            "last_crawl": None,
            "age_hours": None,
        }

    now = datetime.now(timezone.utc)
    last_crawl = _as_utc(state.last_crawl)
    return {
        "status": "ok" if is_data_fresh(last_crawl, hours, now=now) else "stale",
        "last_event_id": state.last_event_id,
        "total_events": state.total_events,
        "crawl_type": state.crawl_type,
        "last_crawl": last_crawl.isoformat(),
        "age_hours": round((now - last_crawl).total_seconds() / 3600, 2),
    }
