"""
Celery application configuration.

Daily schedule (UTC):
- Incremental event crawl: 02:00
- Card and champion sync: 03:00
- Meta aggregation: 06:00
"""
from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging as celery_setup_logging

from ga_meta.core.config import settings
from ga_meta.core.logging import setup_logging

celery_app = Celery(
    "ga_meta",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "ga_meta.tasks.crawler",
        "ga_meta.tasks.cards",
        "ga_meta.tasks.meta",
    ],
)

celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Result settings
    result_expires=86400,

    # Crawls are long and strictly sequential; one at a time per worker
    worker_prefetch_multiplier=1,
    worker_concurrency=1,

    beat_schedule={
        # Incremental crawl: resume after the latest checkpoint
        "crawler-incremental": {
            "task": "ga_meta.tasks.crawler.crawl_incremental",
            "schedule": crontab(hour=2, minute=0),
        },

        # Catalog sync: champions from standings, cards from decklists
        "cards-sync": {
            "task": "ga_meta.tasks.cards.full_sync",
            "schedule": crontab(hour=3, minute=0),
        },

        # Meta aggregation over the rolling window
        "meta-aggregate": {
            "task": "ga_meta.tasks.meta.aggregate",
            "schedule": crontab(hour=6, minute=0),
        },
    },

    task_routes={
        "ga_meta.tasks.crawler.*": {"queue": "crawler"},
        "ga_meta.tasks.cards.*": {"queue": "crawler"},
        "ga_meta.tasks.meta.*": {"queue": "analytics"},
    },

    task_default_queue="default",
)


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Replace Celery's own logging setup with the shared structlog one."""
    setup_logging("worker")
