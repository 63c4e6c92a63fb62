"""
Scheduled meta aggregation.

Runs the three rollups over the rolling window for every format and logs
the headline numbers. Results are returned, not stored; the API computes
the same rollups on demand.
"""
from typing import Any, Optional

import structlog
from celery import shared_task

from ga_meta.core.config import settings
from ga_meta.models import EventFormat
from ga_meta.services.meta_analysis import MetaAnalysisService
from ga_meta.tasks.utils import create_task_session_maker, run_async

logger = structlog.get_logger()

# Formats summarised individually; None is the all-formats rollup
AGGREGATED_FORMATS: list[Optional[EventFormat]] = [None, EventFormat.STANDARD, EventFormat.LIMITED]
TOP_CARDS = 20


@shared_task(bind=True, max_retries=2, default_retry_delay=300, name="ga_meta.tasks.meta.aggregate")
def aggregate(self, days: Optional[int] = None) -> dict[str, Any]:
    """
    Aggregate meta statistics.

    Args:
        days: Window on event start date (defaults to META_WINDOW_DAYS)

    Returns:
        Per-format summary of the rollups
    """
    return run_async(_aggregate_async(days or settings.meta_window_days))


async def _aggregate_async(days: int) -> dict[str, Any]:
    session_maker, engine = create_task_session_maker()
    results: dict[str, Any] = {"days": days, "formats": {}}

    try:
        async with session_maker() as db:
            service = MetaAnalysisService(db)

            for event_format in AGGREGATED_FORMATS:
                key = event_format.value if event_format else "ALL"

                breakdown = await service.calculate_meta_breakdown(format=event_format, days=days)
                champions = await service.calculate_champion_performance(days=days, format=event_format)
                cards = await service.calculate_card_performance(
                    format=event_format,
                    days=days,
                    limit=TOP_CARDS,
                )

                results["formats"][key] = {
                    "breakdown": [entry.model_dump() for entry in breakdown],
                    "champion_performance": [entry.model_dump() for entry in champions],
                    "top_cards": [entry.model_dump() for entry in cards],
                }

                logger.info(
                    "Meta aggregated",
                    format=key,
                    days=days,
                    champions=len(breakdown),
                    top_champion=breakdown[0].champion if breakdown else None,
                    cards=len(cards),
                )

    except Exception as e:
        logger.error("Meta aggregation task failed", error=str(e))
        raise

    finally:
        await engine.dispose()

    return results
