"""
Meta aggregation over the crawled corpus.

Each call selects a base set of events (completed, ranked, optionally one
format and a rolling window on start_date) and rolls decklists or standings
up into per-champion or per-card statistics. Nothing here writes to the
store; results are a function of the corpus at query time.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import structlog
from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.core.exceptions import AggregationError
from ga_meta.models import Card, Decklist, Event, EventFormat, Standing
from ga_meta.schemas.meta import CardPerformance, ChampionPerformance, MetaBreakdown

logger = structlog.get_logger()

TOP_8 = 8
TOP_16 = 16


def _percentage(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return 100.0 * part / whole


def _normalize_format(format: Optional[Union[EventFormat, str]]) -> Optional[EventFormat]:
    if format is None or isinstance(format, EventFormat):
        return format
    return EventFormat.from_str(format)


class MetaAnalysisService:
    """
    Windowed meta statistics.

    Usage:
        service = MetaAnalysisService(db)
        breakdown = await service.calculate_meta_breakdown(format="standard", days=30)
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _select_event_ids(
        self,
        format: Optional[Union[EventFormat, str]] = None,
        days: Optional[int] = None,
    ) -> list[int]:
        """Upstream ids of completed, ranked events in the selection."""
        query = select(Event.event_id).where(
            func.lower(Event.status) == "complete",
            Event.ranked.is_(True),
        )

        event_format = _normalize_format(format)
        if event_format is not None:
            query = query.where(Event.format == event_format)

        if days is not None:
            cutoff = datetime.now(timezone.utc) - timedelta(days=days)
            query = query.where(Event.start_date >= cutoff)

        result = await self.db.execute(query)
        return [row[0] for row in result]

    async def calculate_meta_breakdown(
        self,
        format: Optional[Union[EventFormat, str]] = None,
        days: Optional[int] = None,
    ) -> list[MetaBreakdown]:
        """
        Champion share of decklists in the selected events.

        Returns:
            One entry per champion, most played first
        """
        try:
            event_ids = await self._select_event_ids(format, days)
            if not event_ids:
                logger.info("No events in selection", format=format, days=days)
                return []

            top_8 = func.sum(case((Decklist.rank <= TOP_8, 1), else_=0))
            result = await self.db.execute(
                select(
                    Decklist.champion,
                    func.count(Decklist.id).label("deck_count"),
                    func.avg(Decklist.rank).label("avg_placement"),
                    top_8.label("top_8_count"),
                )
                .where(Decklist.event_id.in_(event_ids))
                .group_by(Decklist.champion)
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Meta breakdown failed", error=str(e))
            raise AggregationError("Failed to calculate meta breakdown") from e

        total_decks = sum(row.deck_count for row in rows)
        breakdown = [
            MetaBreakdown(
                champion=row.champion,
                deck_count=row.deck_count,
                meta_percentage=_percentage(row.deck_count, total_decks),
                avg_placement=float(row.avg_placement or 0.0),
                top_8_count=int(row.top_8_count or 0),
                top_8_percentage=_percentage(row.top_8_count or 0, row.deck_count),
            )
            for row in rows
        ]
        breakdown.sort(key=lambda entry: (-entry.deck_count, entry.champion))

        logger.info(
            "Meta breakdown calculated",
            format=format,
            days=days,
            events=len(event_ids),
            decks=total_decks,
            champions=len(breakdown),
        )
        return breakdown

    async def calculate_champion_performance(
        self,
        format: Optional[Union[EventFormat, str]] = None,
        days: Optional[int] = None,
    ) -> list[ChampionPerformance]:
        """
        Champion results from standings in the selected events.

        conversion_rate is the top 8 rate.
        """
        try:
            event_ids = await self._select_event_ids(format, days)
            if not event_ids:
                logger.info("No events in selection", format=format, days=days)
                return []

            result = await self.db.execute(
                select(
                    Standing.champion,
                    func.count(Standing.id).label("appearances"),
                    func.avg(Standing.rank).label("avg_placement"),
                    func.avg(Standing.match_win_rate).label("win_rate"),
                    func.sum(case((Standing.rank <= TOP_8, 1), else_=0)).label("top_8"),
                    func.sum(case((Standing.rank <= TOP_16, 1), else_=0)).label("top_16"),
                )
                .where(Standing.event_id.in_(event_ids))
                .group_by(Standing.champion)
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Champion performance failed", error=str(e))
            raise AggregationError("Failed to calculate champion performance") from e

        performance = []
        for row in rows:
            top_8_rate = _percentage(row.top_8 or 0, row.appearances)
            performance.append(
                ChampionPerformance(
                    champion=row.champion,
                    total_appearances=row.appearances,
                    total_events=len(event_ids),
                    avg_placement=float(row.avg_placement or 0.0),
                    win_rate=float(row.win_rate or 0.0),
                    top_8_rate=top_8_rate,
                    top_16_rate=_percentage(row.top_16 or 0, row.appearances),
                    conversion_rate=top_8_rate,
                )
            )
        performance.sort(key=lambda entry: (-entry.total_appearances, entry.champion))

        logger.info(
            "Champion performance calculated",
            format=format,
            days=days,
            events=len(event_ids),
            champions=len(performance),
        )
        return performance

    async def calculate_card_performance(
        self,
        format: Optional[Union[EventFormat, str]] = None,
        days: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[CardPerformance]:
        """
        Card inclusion statistics from decklists in the selected events.

        Args:
            format: Optional format filter
            days: Optional rolling window on start_date
            limit: Maximum number of cards returned

        Returns:
            Cards ordered by the number of decks playing them
        """
        try:
            event_ids = await self._select_event_ids(format, days)
            if not event_ids:
                logger.info("No events in selection", format=format, days=days)
                return []

            result = await self.db.execute(
                select(Decklist.card_frequencies, Decklist.rank)
                .where(Decklist.event_id.in_(event_ids))
            )
            decklists = result.all()

            deck_counts: dict[str, int] = {}
            quantities: dict[str, int] = {}
            rank_sums: dict[str, int] = {}
            for frequencies, rank in decklists:
                for slug, quantity in (frequencies or {}).items():
                    deck_counts[slug] = deck_counts.get(slug, 0) + 1
                    quantities[slug] = quantities.get(slug, 0) + quantity
                    rank_sums[slug] = rank_sums.get(slug, 0) + rank

            names: dict[str, str] = {}
            if deck_counts:
                name_rows = await self.db.execute(
                    select(Card.slug, Card.name).where(Card.slug.in_(list(deck_counts)))
                )
                names = {slug: name for slug, name in name_rows}
        except SQLAlchemyError as e:
            logger.error("Card performance failed", error=str(e))
            raise AggregationError("Failed to calculate card performance") from e

        total_decks = len(decklists)
        cards = [
            CardPerformance(
                slug=slug,
                name=names.get(slug, slug),
                deck_count=count,
                total_quantity=quantities[slug],
                meta_percentage=_percentage(count, total_decks),
                avg_quantity=quantities[slug] / count,
                avg_placement=rank_sums[slug] / count,
            )
            for slug, count in deck_counts.items()
        ]
        cards.sort(key=lambda entry: (-entry.deck_count, entry.slug))

        if limit is not None:
            cards = cards[:limit]

        logger.info(
            "Card performance calculated",
            format=format,
            days=days,
            decks=total_decks,
            cards=len(cards),
        )
        return cards
