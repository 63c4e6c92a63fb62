"""
Card catalog sync task.
"""
from typing import Any

import structlog
from celery import shared_task

from ga_meta.services.card_sync import CardSyncService
from ga_meta.services.clients import GatcgClient
from ga_meta.tasks.utils import client_config, create_task_session_maker, run_async

logger = structlog.get_logger()


@shared_task(bind=True, max_retries=3, default_retry_delay=300, name="ga_meta.tasks.cards.full_sync")
def full_sync(self) -> dict[str, Any]:
    """
    Sync champions seen in standings and cards seen in decklists.

    Returns:
        Dictionary with champions and cards synced
    """
    return run_async(_full_sync_async())


async def _full_sync_async() -> dict[str, Any]:
    session_maker, engine = create_task_session_maker()

    try:
        async with client_config() as config:
            async with session_maker() as db:
                service = CardSyncService(GatcgClient(config), db)
                champions, cards = await service.full_sync()

        return {"champions_synced": champions, "cards_synced": cards}

    except Exception as e:
        logger.error("Card sync task failed", error=str(e))
        raise

    finally:
        await engine.dispose()
