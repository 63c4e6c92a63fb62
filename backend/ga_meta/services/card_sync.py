"""
Card and champion catalog sync.

Card slugs are discovered from stored decklists and champion slugs from
stored standings; each is fetched from the card API and upserted by slug.
"""
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.models import Card, Champion
from ga_meta.repositories import CorpusRepository
from ga_meta.services.clients import Empty, Found, GatcgClient, NotFound

logger = structlog.get_logger()


def _champion_from_card(card: Card) -> Champion:
    return Champion(
        slug=card.slug,
        name=card.name,
        element=card.element,
        class_name=card.classes[0] if card.classes else None,
        image_url=card.image_url,
        ability_text=card.card_text,
        life=card.life_modifier,
    )


class CardSyncService:
    """Keeps the cards and champions tables in step with the corpus."""

    def __init__(self, gatcg_client: GatcgClient, db: AsyncSession):
        self.gatcg_client = gatcg_client
        self.db = db
        self.repo = CorpusRepository(db)

    async def _fetch(self, slug: str, kind: str) -> Optional[Card]:
        outcome = await self.gatcg_client.fetch_card(slug)
        if isinstance(outcome, Found):
            return outcome.value
        if isinstance(outcome, (Empty, NotFound)):
            logger.debug(f"{kind.capitalize()} not found in card API", slug=slug)
        else:
            logger.warning(f"Error fetching {kind}", slug=slug, kind=outcome.kind.value)
        return None

    async def sync_cards_from_decklists(self) -> int:
        """
        Fetch and upsert every card that appears in a stored decklist.

        Returns:
            Number of cards synced
        """
        logger.info("Starting card sync from decklists")

        slugs: set[str] = set()
        for decklist in await self.repo.decklists():
            for entry in [*(decklist.main_deck or []), *(decklist.sideboard or [])]:
                slug = entry.get("slug")
                if slug:
                    slugs.add(slug)

        logger.info("Found unique card slugs", count=len(slugs))

        synced = 0
        for slug in sorted(slugs):
            card = await self._fetch(slug, "card")
            if card is None:
                continue
            await self.repo.upsert_card(card)
            synced += 1

        await self.db.commit()
        logger.info("Card sync completed", synced=synced)
        return synced

    async def sync_champions(self, champion_slugs: list[str]) -> int:
        """
        Fetch each champion card; upsert it into both cards and champions.

        Returns:
            Number of champions synced
        """
        logger.info("Starting champion sync", count=len(champion_slugs))

        synced = 0
        for slug in champion_slugs:
            card = await self._fetch(slug, "champion")
            if card is None:
                continue
            champion = _champion_from_card(card)
            await self.repo.upsert_card(card)
            await self.repo.upsert_champion(champion)
            logger.debug("Synced champion", slug=champion.slug, name=champion.name)
            synced += 1

        await self.db.commit()
        logger.info("Champion sync completed", synced=synced)
        return synced

    async def get_champion_slugs_from_standings(self) -> list[str]:
        return await self.repo.champion_slugs()

    async def full_sync(self) -> tuple[int, int]:
        """
        Sync champions from standings, then cards from decklists.

        Returns:
            (champions synced, cards synced)
        """
        logger.info("Starting full catalog sync")

        champion_slugs = await self.get_champion_slugs_from_standings()
        champions_synced = await self.sync_champions(champion_slugs)
        cards_synced = await self.sync_cards_from_decklists()

        logger.info(
            "Full catalog sync completed",
            champions=champions_synced,
            cards=cards_synced,
        )
        return champions_synced, cards_synced
