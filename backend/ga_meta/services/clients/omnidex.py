"""
Omnidex API client for event, standings and statistics data.

The Omnidex exposes events only by numeric id; there is no listing endpoint,
so discovery is done by probing ids in order (see services.crawler).
"""
from datetime import datetime, timezone
from typing import Optional

import structlog

from ga_meta.core.config import ClientConfig, settings
from ga_meta.models import Event, EventFormat, Standing
from ga_meta.schemas.upstream import Envelope, EventData, StandingData, StatisticsData
from ga_meta.services.clients.base import BaseApiClient, FetchOutcome, Found

logger = structlog.get_logger()


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp to an aware UTC datetime; None if absent or malformed."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparsable date", value=value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class OmnidexClient(BaseApiClient):
    """Client for api.gatcg.com/omnidex."""

    name = "omnidex"

    def __init__(self, config: ClientConfig, base_url: Optional[str] = None):
        super().__init__(config, base_url or settings.omnidex_base_url)

    async def fetch_event(self, event_id: int) -> FetchOutcome[Event]:
        """
        Fetch an event by id.

        Returns:
            Found(Event) with has_decklists False until statistics say otherwise
        """
        outcome = await self._fetch(
            f"/events/{event_id}",
            Envelope[EventData],
            ident=event_id,
        )
        if isinstance(outcome, Found):
            return Found(self._convert_to_event(outcome.value))
        return outcome

    async def fetch_standings(self, event_id: int) -> FetchOutcome[list[Standing]]:
        """Fetch final standings for an event, each with match_win_rate computed."""
        outcome = await self._fetch(
            f"/events/{event_id}/standings",
            Envelope[list[StandingData]],
            ident=event_id,
        )
        if isinstance(outcome, Found):
            return Found([self._convert_to_standing(event_id, row) for row in outcome.value])
        return outcome

    async def fetch_event_statistics(self, event_id: int) -> FetchOutcome[tuple[int, bool]]:
        """
        Fetch (player_count, has_decklists) for an event.

        The event endpoint does not report decklist availability, and its
        player count can lag behind the statistics endpoint.
        """
        outcome = await self._fetch(
            f"/events/{event_id}/statistics",
            Envelope[StatisticsData],
            ident=event_id,
        )
        if isinstance(outcome, Found):
            return Found((outcome.value.total_players, outcome.value.has_decklists))
        return outcome

    def _convert_to_event(self, data: EventData) -> Event:
        now = datetime.now(timezone.utc)
        return Event(
            event_id=data.id,
            name=data.name,
            format=EventFormat.from_str(data.format),
            status=data.status,
            ranked=data.ranked,
            player_count=data.player_count,
            start_date=parse_datetime(data.start_date),
            end_date=parse_datetime(data.end_date),
            location=data.location,
            organizer=data.organizer,
            rounds=data.rounds,
            tier=data.tier,
            has_decklists=False,
            crawled_at=now,
        )

    def _convert_to_standing(self, event_id: int, data: StandingData) -> Standing:
        standing = Standing(
            event_id=event_id,
            player_id=data.player_id,
            player_name=data.player_name,
            rank=data.rank,
            champion=data.champion,
            wins=data.wins,
            losses=data.losses,
            draws=data.draws,
            has_decklist=bool(data.has_decklist),
        )
        standing.calculate_win_rate()
        return standing
