"""
Omni web API client for player decklists.
"""
from typing import Optional

import structlog

from ga_meta.core.config import ClientConfig, settings
from ga_meta.models import Decklist
from ga_meta.schemas.upstream import DeckCardData, DecklistData, Envelope
from ga_meta.services.clients.base import (
    BaseApiClient,
    Empty,
    FetchOutcome,
    Found,
    NotFound,
)

logger = structlog.get_logger()


def _card_entry(card: DeckCardData) -> dict:
    return {
        "slug": card.slug,
        "name": card.name,
        "quantity": card.quantity,
        "card_type": card.card_type,
        "element": card.element,
        "cost": card.cost,
    }


class OmniWebClient(BaseApiClient):
    """Client for omni.gatcg.com/api."""

    name = "omni_web"

    def __init__(self, config: ClientConfig, base_url: Optional[str] = None):
        super().__init__(config, base_url or settings.omni_web_base_url)

    async def fetch_decklist(self, event_id: int, player_id: str) -> FetchOutcome[Decklist]:
        """
        Fetch one player's decklist for an event.

        Returns:
            Found(Decklist) with counts and card_frequencies already computed
        """
        outcome = await self._fetch(
            f"/events/{event_id}/decklist",
            Envelope[DecklistData],
            ident=f"{event_id}/{player_id}",
            params={"player": player_id},
        )
        if isinstance(outcome, Found):
            return Found(self._convert_to_decklist(event_id, outcome.value))
        return outcome

    async def fetch_decklists(self, event_id: int, player_ids: list[str]) -> list[Decklist]:
        """
        Fetch decklists for several players, one request at a time.

        Players whose decklist is missing or fails to load are skipped.
        """
        decklists = []

        for player_id in player_ids:
            outcome = await self.fetch_decklist(event_id, player_id)
            if isinstance(outcome, Found):
                decklists.append(outcome.value)
            elif isinstance(outcome, (Empty, NotFound)):
                logger.debug("No decklist", event_id=event_id, player_id=player_id)
            else:
                logger.warning(
                    "Failed to fetch decklist",
                    event_id=event_id,
                    player_id=player_id,
                    kind=outcome.kind.value,
                    error=outcome.message[:200],
                )

        return decklists

    def _convert_to_decklist(self, event_id: int, data: DecklistData) -> Decklist:
        decklist = Decklist(
            event_id=event_id,
            player_id=data.player_id,
            player_name=data.player_name,
            champion=data.champion,
            rank=data.rank,
            main_deck=[_card_entry(card) for card in data.main_deck],
            sideboard=[_card_entry(card) for card in (data.sideboard or [])],
        )
        decklist.calculate_frequencies()
        return decklist
