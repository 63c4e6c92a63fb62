"""
Sequential event discovery and ingestion.

The Omnidex has no listing endpoint, so events are discovered by probing
ids in increasing order, one at a time. A run stops once a configured number
of consecutive probes miss. Interesting events additionally pull standings
and decklists. Progress is checkpointed so the next run resumes after the
last probed id.

All writes are natural-key upserts, so re-probing ids after an interrupted
run is harmless. Only one crawl may run at a time; that is enforced by
deployment, not here.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.core.config import settings
from ga_meta.models import Event
from ga_meta.repositories import CorpusRepository
from ga_meta.services.clients import (
    Empty,
    FetchError,
    FetchOutcome,
    Found,
    NotFound,
    OmnidexClient,
    OmniWebClient,
)

logger = structlog.get_logger()


class CrawlAction(str, Enum):
    """What a probe outcome does to the crawl."""
    RESET = "reset"                        # Consecutive misses back to 0
    MISS = "miss"                          # Count toward halting
    MISS_AND_REQUEUE = "miss_and_requeue"  # Count toward halting, probe again after the run


class CrawlPhase(str, Enum):
    PROBING = "probing"
    INGESTING = "ingesting"
    SKIPPING = "skipping"
    HALTED = "halted"


@dataclass(frozen=True)
class OutcomePolicy:
    """
    Maps each fetch outcome to a crawl action.

    Found always resets the consecutive-miss counter. A policy may also map
    a non-found outcome to RESET; that clears the counter without counting
    or ingesting anything. Requeued misses get a second look once the main
    loop is done.
    """
    empty: CrawlAction = CrawlAction.MISS
    not_found: CrawlAction = CrawlAction.MISS
    retryable_error: CrawlAction = CrawlAction.MISS_AND_REQUEUE
    fatal_error: CrawlAction = CrawlAction.MISS

    def action_for(self, outcome: FetchOutcome) -> CrawlAction:
        if isinstance(outcome, Found):
            return CrawlAction.RESET
        if isinstance(outcome, Empty):
            return self.empty
        if isinstance(outcome, NotFound):
            return self.not_found
        if isinstance(outcome, FetchError) and outcome.kind.retryable:
            return self.retryable_error
        return self.fatal_error


@dataclass
class CrawlResult:
    """Summary of one crawl run."""
    crawl_type: str
    start_id: int
    last_event_id: int
    events_found: int = 0
    events_interesting: int = 0
    requeued: list[int] = field(default_factory=list)
    recovered: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "crawl_type": self.crawl_type,
            "start_id": self.start_id,
            "last_event_id": self.last_event_id,
            "events_found": self.events_found,
            "events_interesting": self.events_interesting,
            "requeued": list(self.requeued),
            "recovered": list(self.recovered),
        }


class EventCrawler:
    """
    Discovers events by id probing and ingests them with their standings and decklists.

    Usage:
        async with session_maker() as db:
            crawler = EventCrawler(db, OmnidexClient(config), OmniWebClient(config))
            result = await crawler.crawl_incremental()
    """

    def __init__(
        self,
        db: AsyncSession,
        omnidex: OmnidexClient,
        omni_web: OmniWebClient,
        *,
        max_misses: Optional[int] = None,
        checkpoint_interval: Optional[int] = None,
        policy: Optional[OutcomePolicy] = None,
    ):
        """
        Args:
            db: Database session; committed after each event and checkpoint
            omnidex: Event/standings/statistics client
            omni_web: Decklist client
            max_misses: Consecutive misses that halt a run
            checkpoint_interval: Probes between checkpoints
            policy: Outcome-to-action table
        """
        self.db = db
        self.repo = CorpusRepository(db)
        self.omnidex = omnidex
        self.omni_web = omni_web
        self.max_misses = max_misses if max_misses is not None else settings.crawler_max_misses
        self.checkpoint_interval = checkpoint_interval or settings.crawler_checkpoint_interval
        self.policy = policy or OutcomePolicy()
        self.phase = CrawlPhase.HALTED

    async def resume_point(self) -> int:
        """Id after the newest checkpoint, or 1 when no checkpoint exists."""
        state = await self.repo.latest_checkpoint()
        if state is None:
            return 1
        return state.last_event_id + 1

    async def crawl_incremental(self) -> CrawlResult:
        """Resume from the newest checkpoint."""
        start_id = await self.resume_point()
        logger.info("Starting incremental event crawl", start_id=start_id)
        return await self.crawl_historical(start_id, crawl_type="incremental")

    async def crawl_historical(self, start_id: int, crawl_type: str = "historical") -> CrawlResult:
        """
        Probe ids from start_id upward until max_misses consecutive misses.

        Args:
            start_id: First id to probe
            crawl_type: Tag stored on checkpoints

        Returns:
            CrawlResult; last_event_id is the highest id probed
        """
        logger.info(
            "Starting event crawl",
            crawl_type=crawl_type,
            start_id=start_id,
            max_misses=self.max_misses,
        )

        result = CrawlResult(crawl_type=crawl_type, start_id=start_id, last_event_id=start_id - 1)
        current_id = start_id
        misses = 0
        probed = 0

        while misses < self.max_misses:
            self.phase = CrawlPhase.PROBING
            outcome = await self.omnidex.fetch_event(current_id)
            action = self.policy.action_for(outcome)

            if action is CrawlAction.RESET:
                misses = 0
                if isinstance(outcome, Found):
                    result.events_found += 1
                    if await self._ingest(outcome.value):
                        result.events_interesting += 1
                else:
                    self._log_miss(current_id, outcome, misses)
            else:
                misses += 1
                self._log_miss(current_id, outcome, misses)
                if action is CrawlAction.MISS_AND_REQUEUE:
                    result.requeued.append(current_id)

            result.last_event_id = current_id
            probed += 1
            current_id += 1

            if probed % self.checkpoint_interval == 0:
                await self._checkpoint(result)

        self.phase = CrawlPhase.HALTED
        await self._checkpoint(result)

        logger.info(
            "Event crawl halted",
            crawl_type=crawl_type,
            last_event_id=result.last_event_id,
            events_found=result.events_found,
            requeued=len(result.requeued),
        )

        if result.requeued:
            await self._retry_requeued(result)

        return result

    async def _retry_requeued(self, result: CrawlResult) -> None:
        """Probe each requeued id once more; hits are ingested, misses dropped."""
        logger.info("Retrying requeued event ids", count=len(result.requeued))

        for event_id in sorted(result.requeued):
            outcome = await self.omnidex.fetch_event(event_id)
            if not isinstance(outcome, Found):
                logger.debug("Requeued event still missing", event_id=event_id)
                continue
            result.events_found += 1
            result.recovered.append(event_id)
            if await self._ingest(outcome.value):
                result.events_interesting += 1

        self.phase = CrawlPhase.HALTED
        if result.recovered:
            await self._checkpoint(result)
            logger.info("Recovered requeued events", event_ids=result.recovered)

    async def _ingest(self, event: Event) -> bool:
        """
        Refresh statistics, cascade if interesting, then upsert the event.

        Returns:
            Whether the event was interesting
        """
        logger.info("Found event", event_id=event.event_id, name=event.name)
        await self._refresh_statistics(event)

        interesting = event.is_interesting()
        if interesting:
            self.phase = CrawlPhase.INGESTING
            logger.info("Event is interesting, fetching details", event_id=event.event_id)
            await self._cascade(event)
        else:
            self.phase = CrawlPhase.SKIPPING
            logger.debug("Event is not interesting, skipping details", event_id=event.event_id)

        await self.repo.upsert_event(event)
        await self.db.commit()
        return interesting

    async def _refresh_statistics(self, event: Event) -> None:
        """Best effort; on any miss the event keeps its current values."""
        outcome = await self.omnidex.fetch_event_statistics(event.event_id)
        if isinstance(outcome, Found):
            event.player_count, event.has_decklists = outcome.value
        else:
            logger.debug("No statistics for event", event_id=event.event_id)

    async def _cascade(self, event: Event) -> None:
        outcome = await self.omnidex.fetch_standings(event.event_id)
        if not isinstance(outcome, Found):
            logger.warning(
                "Could not fetch standings",
                event_id=event.event_id,
                outcome=type(outcome).__name__,
            )
            return

        standings = outcome.value
        for standing in standings:
            await self.repo.upsert_standing(standing)
        logger.info("Saved standings", event_id=event.event_id, count=len(standings))

        if not event.has_decklists:
            return

        player_ids = [s.player_id for s in standings if s.has_decklist]
        logger.info("Fetching decklists", event_id=event.event_id, count=len(player_ids))

        decklists = await self.omni_web.fetch_decklists(event.event_id, player_ids)
        for decklist in decklists:
            await self.repo.upsert_decklist(decklist)
        logger.info("Saved decklists", event_id=event.event_id, count=len(decklists))

    async def _checkpoint(self, result: CrawlResult) -> None:
        await self.repo.append_checkpoint(
            last_event_id=result.last_event_id,
            total_events=result.events_found,
            crawl_type=result.crawl_type,
        )
        await self.db.commit()

    def _log_miss(self, event_id: int, outcome: FetchOutcome, misses: int) -> None:
        if isinstance(outcome, FetchError):
            logger.warning(
                "Error fetching event",
                event_id=event_id,
                kind=outcome.kind.value,
                error=outcome.message[:200],
                consecutive_misses=misses,
            )
        else:
            logger.debug(
                "Event missing",
                event_id=event_id,
                outcome=type(outcome).__name__,
                consecutive_misses=misses,
            )
