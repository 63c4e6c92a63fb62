"""
Crawl, catalog sync and meta aggregation services.
"""
from ga_meta.services.card_sync import CardSyncService
from ga_meta.services.crawler import (
    CrawlAction,
    CrawlPhase,
    CrawlResult,
    EventCrawler,
    OutcomePolicy,
)
from ga_meta.services.meta_analysis import MetaAnalysisService

__all__ = [
    "CardSyncService",
    "CrawlAction",
    "CrawlPhase",
    "CrawlResult",
    "EventCrawler",
    "OutcomePolicy",
    "MetaAnalysisService",
]
