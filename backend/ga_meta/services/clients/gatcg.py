"""
GATCG card API client.
"""
from typing import Optional

import structlog

from ga_meta.core.config import ClientConfig, settings
from ga_meta.models import Card
from ga_meta.schemas.upstream import CardData, Envelope
from ga_meta.services.clients.base import (
    BaseApiClient,
    Empty,
    FetchOutcome,
    Found,
    NotFound,
)

logger = structlog.get_logger()


class GatcgClient(BaseApiClient):
    """Client for api.gatcg.com/cards."""

    name = "gatcg"

    def __init__(self, config: ClientConfig, base_url: Optional[str] = None):
        super().__init__(config, base_url or settings.gatcg_base_url)

    async def fetch_card(self, slug: str) -> FetchOutcome[Card]:
        """Fetch a card by slug."""
        outcome = await self._fetch(f"/cards/{slug}", Envelope[CardData], ident=slug)
        if isinstance(outcome, Found):
            return Found(self._convert_to_card(outcome.value))
        return outcome

    async def fetch_cards(self, slugs: list[str]) -> list[Card]:
        """Fetch several cards; missing or failing slugs are skipped."""
        cards = []
        for slug in slugs:
            outcome = await self.fetch_card(slug)
            if isinstance(outcome, Found):
                cards.append(outcome.value)
            elif isinstance(outcome, (Empty, NotFound)):
                logger.debug("Card not found", slug=slug)
            else:
                logger.warning("Failed to fetch card", slug=slug, kind=outcome.kind.value)
        return cards

    def _convert_to_card(self, data: CardData) -> Card:
        return Card(
            slug=data.slug,
            name=data.name,
            card_type=data.card_type,
            element=data.element,
            classes=data.classes,
            subtypes=data.subtypes,
            cost=data.cost,
            reserve_cost=data.reserve_cost,
            power=data.power,
            life_modifier=data.life_modifier,
            card_text=data.effect_text,
            flavor_text=data.flavor_text,
            image_url=data.image_url,
            set_name=data.set_name,
            card_number=data.collector_number,
            rarity=data.rarity,
            artist=data.artist,
            banned_standard=False,
            banned_limited=False,
        )
