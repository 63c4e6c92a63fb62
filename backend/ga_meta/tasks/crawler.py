"""
Event crawl tasks.

Probes the Omnidex for new events and ingests standings and decklists for
the interesting ones. Only one crawl should run at a time; the crawler
queue is served by a single worker.
"""
from typing import Any, Optional

import structlog
from celery import shared_task

from ga_meta.core.config import settings
from ga_meta.services.clients import OmnidexClient, OmniWebClient
from ga_meta.services.crawler import EventCrawler
from ga_meta.tasks.utils import client_config, create_task_session_maker, run_async

logger = structlog.get_logger()


@shared_task(bind=True, max_retries=1, default_retry_delay=600, name="ga_meta.tasks.crawler.crawl_incremental")
def crawl_incremental(self) -> dict[str, Any]:
    """
    Resume the crawl after the latest checkpoint.

    Returns:
        Crawl summary
    """
    return run_async(_crawl_async(start_id=None))


@shared_task(bind=True, max_retries=1, default_retry_delay=600, name="ga_meta.tasks.crawler.crawl_historical")
def crawl_historical(self, start_id: Optional[int] = None) -> dict[str, Any]:
    """
    Backfill from an explicit start id.

    Args:
        start_id: First id to probe (defaults to CRAWLER_START_ID)

    Returns:
        Crawl summary
    """
    return run_async(_crawl_async(start_id=start_id or settings.crawler_start_id))


async def _crawl_async(start_id: Optional[int]) -> dict[str, Any]:
    """Incremental when start_id is None, historical otherwise."""
    session_maker, engine = create_task_session_maker()

    try:
        async with client_config() as config:
            async with session_maker() as db:
                crawler = EventCrawler(db, OmnidexClient(config), OmniWebClient(config))
                try:
                    if start_id is None:
                        result = await crawler.crawl_incremental()
                    else:
                        result = await crawler.crawl_historical(start_id)
                except Exception as e:
                    await db.rollback()
                    logger.error("Event crawl failed", start_id=start_id, error=str(e))
                    raise

        summary = result.to_dict()
        logger.info("Event crawl completed", **summary)
        return summary

    finally:
        await engine.dispose()
