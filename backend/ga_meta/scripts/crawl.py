"""
Run an event crawl from the command line.

Usage:
    python -m ga_meta.scripts.crawl --incremental
    python -m ga_meta.scripts.crawl --start-id 1200 --max-misses 25
    python -m ga_meta.scripts.crawl --incremental --sync-cards
"""
import argparse
import asyncio
from typing import Optional

from ga_meta.core.config import ClientConfig, settings
from ga_meta.core.logging import setup_logging
from ga_meta.db.session import async_session_maker, create_tables, engine
from ga_meta.services.card_sync import CardSyncService
from ga_meta.services.clients import GatcgClient, OmnidexClient, OmniWebClient
from ga_meta.services.crawler import CrawlResult, EventCrawler


async def run_crawl(
    start_id: Optional[int],
    max_misses: Optional[int] = None,
    sync_cards: bool = False,
    init_db: bool = False,
) -> CrawlResult:
    """Incremental when start_id is None, historical otherwise."""
    config = ClientConfig.from_settings()
    try:
        if init_db:
            await create_tables()

        async with async_session_maker() as db:
            crawler = EventCrawler(
                db,
                OmnidexClient(config),
                OmniWebClient(config),
                max_misses=max_misses,
            )
            if start_id is None:
                result = await crawler.crawl_incremental()
            else:
                result = await crawler.crawl_historical(start_id)

            if sync_cards:
                await CardSyncService(GatcgClient(config), db).full_sync()

        return result
    finally:
        await config.aclose()
        await engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crawl Grand Archive events from the Omnidex")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--start-id",
        type=int,
        help="Backfill from this event id",
    )
    mode.add_argument(
        "--incremental",
        action="store_true",
        help="Resume after the latest checkpoint",
    )
    parser.add_argument(
        "--max-misses",
        type=int,
        help=f"Consecutive misses before halting (default: {settings.crawler_max_misses})",
    )
    parser.add_argument(
        "--sync-cards",
        action="store_true",
        help="Sync champions and cards after crawling",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before crawling",
    )
    return parser


async def main(argv: Optional[list[str]] = None):
    args = build_parser().parse_args(argv)
    setup_logging("cli")

    result = await run_crawl(
        start_id=None if args.incremental else max(args.start_id, 1),
        max_misses=args.max_misses,
        sync_cards=args.sync_cards,
        init_db=args.create_tables,
    )

    print(
        f"Probed ids {result.start_id}-{result.last_event_id}: "
        f"{result.events_found} events found, "
        f"{result.events_interesting} ingested in full, "
        f"{len(result.recovered)}/{len(result.requeued)} requeued ids recovered."
    )


if __name__ == "__main__":
    asyncio.run(main())
