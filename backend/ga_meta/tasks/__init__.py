"""
Celery tasks for the scheduled jobs.

Includes:
- Crawler tasks: incremental crawl and historical backfill
- Card sync: champion and card catalog refresh
- Meta aggregation: windowed rollups
"""
from ga_meta.tasks.celery_app import celery_app

__all__ = ["celery_app"]
