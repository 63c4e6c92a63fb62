"""
Tests for the meta aggregation service.
"""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from ga_meta.core.exceptions import AggregationError
from ga_meta.models import Card, EventFormat
from ga_meta.services.meta_analysis import MetaAnalysisService


@pytest.fixture
def seed(db_session):
    async def _seed(*objects):
        db_session.add_all(objects)
        await db_session.commit()
    return _seed


class TestEventSelection:
    """Completed, ranked, optional format and window."""

    @pytest.mark.asyncio
    async def test_filters(self, db_session, seed, event_factory):
        await seed(
            event_factory(1),
            event_factory(2, status="Complete", format=EventFormat.LIMITED),
            event_factory(3, ranked=False),
            event_factory(4, status="in_progress"),
            event_factory(5, days_ago=90),
            event_factory(6, days_ago=None),
        )
        service = MetaAnalysisService(db_session)

        assert sorted(await service._select_event_ids()) == [1, 2, 5, 6]
        assert sorted(await service._select_event_ids(format=EventFormat.STANDARD)) == [1, 5, 6]
        assert sorted(await service._select_event_ids(format="limited")) == [2]
        assert sorted(await service._select_event_ids(days=30)) == [1, 2]
        assert await service._select_event_ids(format=EventFormat.DRAFT) == []


class TestMetaBreakdown:
    """Champion share of decklists."""

    @pytest.mark.asyncio
    async def test_percentages(self, db_session, seed, event_factory, decklist_factory):
        decklists = []
        for i in range(6):
            decklists.append(decklist_factory(1, f"l{i}", champion="lorraine", rank=i + 1))
        for i in range(3):
            decklists.append(decklist_factory(1, f"r{i}", champion="rai", rank=i + 7))
        decklists.append(decklist_factory(1, "s0", champion="silvie", rank=10))
        # Unranked event, excluded
        decklists.append(decklist_factory(2, "x0", champion="silvie", rank=1))
        await seed(event_factory(1), event_factory(2, ranked=False), *decklists)

        breakdown = await MetaAnalysisService(db_session).calculate_meta_breakdown()

        assert [b.champion for b in breakdown] == ["lorraine", "rai", "silvie"]
        assert [b.deck_count for b in breakdown] == [6, 3, 1]
        assert [b.meta_percentage for b in breakdown] == pytest.approx([60.0, 30.0, 10.0])
        assert sum(b.meta_percentage for b in breakdown) == pytest.approx(100.0)

        lorraine, rai, silvie = breakdown
        assert lorraine.avg_placement == pytest.approx(3.5)
        assert lorraine.top_8_count == 6
        assert lorraine.top_8_percentage == pytest.approx(100.0)
        assert rai.top_8_count == 2
        assert rai.top_8_percentage == pytest.approx(200 / 3)
        assert silvie.top_8_count == 0
        assert lorraine.win_rate is None

    @pytest.mark.asyncio
    async def test_empty_selection(self, db_session, seed, event_factory, decklist_factory):
        await seed(event_factory(1, ranked=False), decklist_factory(1, "p", champion="rai", rank=1))

        assert await MetaAnalysisService(db_session).calculate_meta_breakdown() == []

    @pytest.mark.asyncio
    async def test_format_and_window(self, db_session, seed, event_factory, decklist_factory):
        await seed(
            event_factory(1, format=EventFormat.STANDARD),
            event_factory(2, format=EventFormat.LIMITED),
            event_factory(3, days_ago=60),
            decklist_factory(1, "a", champion="lorraine", rank=1),
            decklist_factory(2, "b", champion="rai", rank=1),
            decklist_factory(3, "c", champion="silvie", rank=1),
        )
        service = MetaAnalysisService(db_session)

        standard = await service.calculate_meta_breakdown(format="standard", days=30)
        assert [b.champion for b in standard] == ["lorraine"]
        assert standard[0].meta_percentage == pytest.approx(100.0)

        everything = await service.calculate_meta_breakdown()
        assert {b.champion for b in everything} == {"lorraine", "rai", "silvie"}


class TestChampionPerformance:
    """Standings-based rollup."""

    @pytest.mark.asyncio
    async def test_rates(self, db_session, seed, event_factory, standing_factory):
        await seed(
            event_factory(1),
            event_factory(2),
            standing_factory(1, "a", rank=1, champion="lorraine", wins=4, losses=0),
            standing_factory(1, "b", rank=12, champion="lorraine", wins=2, losses=2),
            standing_factory(2, "c", rank=20, champion="lorraine", wins=1, losses=3),
            standing_factory(2, "d", rank=3, champion="rai", wins=3, losses=1),
        )

        performance = await MetaAnalysisService(db_session).calculate_champion_performance()

        assert [p.champion for p in performance] == ["lorraine", "rai"]
        lorraine, rai = performance
        assert lorraine.total_appearances == 3
        assert lorraine.total_events == 2
        assert lorraine.avg_placement == pytest.approx(11.0)
        assert lorraine.win_rate == pytest.approx((1.0 + 0.5 + 0.25) / 3)
        assert lorraine.top_8_rate == pytest.approx(100 / 3)
        assert lorraine.top_16_rate == pytest.approx(200 / 3)
        assert lorraine.conversion_rate == lorraine.top_8_rate
        assert rai.top_8_rate == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_unplayed_standings_do_not_skew_win_rate(self, db_session, seed, event_factory, standing_factory):
        await seed(
            event_factory(1),
            standing_factory(1, "a", rank=1, champion="rai", wins=1, losses=1),
            standing_factory(1, "b", rank=2, champion="rai"),
        )

        (rai,) = await MetaAnalysisService(db_session).calculate_champion_performance()

        assert rai.win_rate == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_empty(self, db_session):
        assert await MetaAnalysisService(db_session).calculate_champion_performance(days=7) == []


class TestRollupArguments:
    """All rollups take (format, days) in the same order."""

    @pytest.mark.asyncio
    async def test_positional_format_then_days(self, db_session, seed, event_factory, standing_factory, decklist_factory):
        await seed(
            event_factory(1, format=EventFormat.STANDARD),
            event_factory(2, format=EventFormat.LIMITED),
            event_factory(3, format=EventFormat.STANDARD, days_ago=60),
            standing_factory(1, "a", rank=1, champion="rai", wins=3),
            standing_factory(2, "b", rank=1, champion="silvie", wins=3),
            standing_factory(3, "c", rank=1, champion="tonoris", wins=3),
            decklist_factory(1, "a", champion="rai", rank=1, main_deck=[("x", 4)]),
            decklist_factory(2, "b", champion="silvie", rank=1, main_deck=[("y", 4)]),
            decklist_factory(3, "c", champion="tonoris", rank=1, main_deck=[("z", 4)]),
        )
        service = MetaAnalysisService(db_session)

        breakdown = await service.calculate_meta_breakdown("standard", 30)
        champions = await service.calculate_champion_performance("standard", 30)
        cards = await service.calculate_card_performance("standard", 30)

        assert [b.champion for b in breakdown] == ["rai"]
        assert [c.champion for c in champions] == ["rai"]
        assert [c.slug for c in cards] == ["x"]


class TestCardPerformance:
    """Decklist card accumulation."""

    @pytest.mark.asyncio
    async def test_accumulation_sort_and_names(self, db_session, seed, event_factory, decklist_factory):
        await seed(
            event_factory(1),
            Card(slug="a", name="Arcane Blast"),
            decklist_factory(1, "p1", champion="rai", rank=1, main_deck=[("a", 4), ("b", 2)]),
            decklist_factory(1, "p2", champion="rai", rank=3, main_deck=[("a", 2), ("c", 1)], sideboard=[("a", 1)]),
            decklist_factory(1, "p3", champion="rai", rank=5, main_deck=[("a", 1), ("b", 4)]),
            decklist_factory(1, "p4", champion="rai", rank=7, main_deck=[("d", 3)]),
        )

        cards = await MetaAnalysisService(db_session).calculate_card_performance()

        assert [c.slug for c in cards] == ["a", "b", "c", "d"]
        assert [c.deck_count for c in cards] == [3, 2, 1, 1]
        a, b, c, _ = cards
        assert a.name == "Arcane Blast"
        assert b.name == "b"
        assert a.total_quantity == 8
        assert a.avg_quantity == pytest.approx(8 / 3)
        assert a.avg_placement == pytest.approx(3.0)
        assert a.meta_percentage == pytest.approx(75.0)
        assert b.avg_placement == pytest.approx(3.0)
        assert c.meta_percentage == pytest.approx(25.0)

    @pytest.mark.asyncio
    async def test_limit(self, db_session, seed, event_factory, decklist_factory):
        await seed(
            event_factory(1),
            decklist_factory(1, "p1", champion="rai", rank=1, main_deck=[("a", 1), ("b", 1), ("c", 1)]),
            decklist_factory(1, "p2", champion="rai", rank=2, main_deck=[("a", 1), ("b", 1)]),
            decklist_factory(1, "p3", champion="rai", rank=3, main_deck=[("a", 1)]),
        )

        cards = await MetaAnalysisService(db_session).calculate_card_performance(limit=2)

        assert [c.slug for c in cards] == ["a", "b"]
        counts = [c.deck_count for c in cards]
        assert counts == sorted(counts, reverse=True)

    @pytest.mark.asyncio
    async def test_empty(self, db_session):
        assert await MetaAnalysisService(db_session).calculate_card_performance(limit=5) == []


class TestStoreFailure:
    """Store errors fail the whole aggregation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method",
        ["calculate_meta_breakdown", "calculate_champion_performance", "calculate_card_performance"],
    )
    async def test_wrapped_in_aggregation_error(self, method):
        db = AsyncMock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

        with pytest.raises(AggregationError):
            await getattr(MetaAnalysisService(db), method)()
