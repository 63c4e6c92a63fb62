"""
Natural-key persistence for the crawled corpus.

Every write here is an upsert keyed by the upstream identifiers, so replaying
a partially completed crawl is idempotent. Checkpoints are the exception:
they are append-only and the newest one wins.
"""
from datetime import datetime, timezone
from typing import Optional, Sequence, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.db.base import Base
from ga_meta.models import Card, Champion, CrawlerState, Decklist, Event, Standing

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=Base)


class CorpusRepository:
    """
    Upserts and checkpoint access for events, standings, decklists and catalog rows.

    Usage:
        repo = CorpusRepository(db)
        event, created = await repo.upsert_event(parsed_event)
        await db.commit()
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _upsert(self, obj: ModelType) -> tuple[ModelType, bool]:
        """
        Insert obj, or copy its values onto the row with the same natural key.

        Returns:
            (persistent instance, created)
        """
        model = type(obj)
        query = select(model)
        for key, value in obj.natural_key().items():
            query = query.where(getattr(model, key) == value)
        existing = await self.db.scalar(query)

        if existing is None:
            self.db.add(obj)
            await self.db.flush()
            return obj, True

        for key, value in obj.upstream_values().items():
            setattr(existing, key, value)
        await self.db.flush()
        return existing, False

    async def upsert_event(self, event: Event) -> tuple[Event, bool]:
        return await self._upsert(event)

    async def upsert_standing(self, standing: Standing) -> tuple[Standing, bool]:
        return await self._upsert(standing)

    async def upsert_decklist(self, decklist: Decklist) -> tuple[Decklist, bool]:
        return await self._upsert(decklist)

    async def upsert_card(self, card: Card) -> tuple[Card, bool]:
        return await self._upsert(card)

    async def upsert_champion(self, champion: Champion) -> tuple[Champion, bool]:
        return await self._upsert(champion)

    async def append_checkpoint(
        self,
        last_event_id: int,
        total_events: int,
        crawl_type: str,
        at: Optional[datetime] = None,
    ) -> CrawlerState:
        """Append a crawl checkpoint. Existing checkpoints are never modified."""
        state = CrawlerState(
            last_event_id=last_event_id,
            total_events=total_events,
            crawl_type=crawl_type,
            last_crawl=at or datetime.now(timezone.utc),
        )
        self.db.add(state)
        await self.db.flush()

        logger.debug(
            "Checkpoint saved",
            last_event_id=last_event_id,
            total_events=total_events,
            crawl_type=crawl_type,
        )
        return state

    async def latest_checkpoint(self) -> Optional[CrawlerState]:
        """The checkpoint with the most recent timestamp, regardless of its event id."""
        return await self.db.scalar(
            select(CrawlerState)
            .order_by(CrawlerState.last_crawl.desc(), CrawlerState.id.desc())
            .limit(1)
        )

    async def get_event(self, event_id: int) -> Optional[Event]:
        return await self.db.scalar(select(Event).where(Event.event_id == event_id))

    async def decklists(self) -> Sequence[Decklist]:
        result = await self.db.execute(select(Decklist).order_by(Decklist.id))
        return result.scalars().all()

    async def champion_slugs(self) -> list[str]:
        """Distinct champion slugs seen in standings."""
        result = await self.db.execute(
            select(Standing.champion).distinct().order_by(Standing.champion)
        )
        return [row[0] for row in result]
