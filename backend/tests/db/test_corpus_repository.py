"""
Tests for natural-key upserts, checkpoints and table creation.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, inspect, select

from ga_meta.db.session import create_tables
from ga_meta.models import Event, Standing
from ga_meta.repositories import CorpusRepository


@pytest.mark.asyncio
async def test_create_tables_is_idempotent(test_engine):
    await create_tables(test_engine)
    await create_tables(test_engine)

    async with test_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert {"events", "standings", "decklists", "crawler_states", "cards", "champions"} <= set(tables)


@pytest.mark.asyncio
async def test_upsert_event_overwrites_by_event_id(db_session, event_factory):
    repo = CorpusRepository(db_session)

    _, created = await repo.upsert_event(event_factory(9, name="Draft Night", player_count=8))
    await db_session.commit()
    stored, created_again = await repo.upsert_event(event_factory(9, name="Draft Night (final)", player_count=12))
    await db_session.commit()

    assert created is True
    assert created_again is False
    assert await db_session.scalar(select(func.count()).select_from(Event)) == 1
    assert stored.name == "Draft Night (final)"
    assert stored.player_count == 12
    assert (await repo.get_event(9)).name == "Draft Night (final)"
    assert await repo.get_event(10) is None


@pytest.mark.asyncio
async def test_upsert_standing_keyed_by_event_and_player(db_session, standing_factory):
    repo = CorpusRepository(db_session)

    await repo.upsert_standing(standing_factory(1, "p1", rank=4, champion="rai"))
    await repo.upsert_standing(standing_factory(1, "p1", rank=2, champion="rai"))
    await repo.upsert_standing(standing_factory(2, "p1", rank=1, champion="rai"))
    await db_session.commit()

    result = await db_session.execute(select(Standing.event_id, Standing.rank).order_by(Standing.event_id))
    assert result.all() == [(1, 2), (2, 1)]


@pytest.mark.asyncio
async def test_checkpoints_are_append_only(db_session):
    repo = CorpusRepository(db_session)
    now = datetime.now(timezone.utc)

    assert await repo.latest_checkpoint() is None

    await repo.append_checkpoint(300, 20, "historical", at=now - timedelta(hours=2))
    await repo.append_checkpoint(150, 5, "incremental", at=now)
    await db_session.commit()

    latest = await repo.latest_checkpoint()
    assert latest.last_event_id == 150
    assert latest.crawl_type == "incremental"
