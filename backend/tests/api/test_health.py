"""
Tests for health endpoints.
"""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from ga_meta.core.data_freshness import is_data_fresh
from ga_meta.repositories import CorpusRepository


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["services"]["database"] == "ok"
    assert data["services"]["crawler"] == "never_run"
    assert data["crawler"]["last_event_id"] is None


@pytest.mark.asyncio
async def test_health_reports_latest_checkpoint(client: AsyncClient, db_session):
    repo = CorpusRepository(db_session)
    await repo.append_checkpoint(last_event_id=50, total_events=12, crawl_type="historical",
                                 at=datetime.now(timezone.utc) - timedelta(days=5))
    await repo.append_checkpoint(last_event_id=64, total_events=3, crawl_type="incremental",
                                 at=datetime.now(timezone.utc) - timedelta(hours=2))
    await db_session.commit()

    data = (await client.get("/api/health")).json()

    assert data["status"] == "healthy"
    assert data["services"]["crawler"] == "ok"
    assert data["crawler"]["last_event_id"] == 64
    assert data["crawler"]["crawl_type"] == "incremental"
    assert 1.9 < data["crawler"]["age_hours"] < 2.5


@pytest.mark.asyncio
async def test_stale_crawler_degrades_health(client: AsyncClient, db_session):
    await CorpusRepository(db_session).append_checkpoint(
        last_event_id=10, total_events=1, crawl_type="incremental",
        at=datetime.now(timezone.utc) - timedelta(days=3),
    )
    await db_session.commit()

    data = (await client.get("/api/health")).json()

    assert data["status"] == "degraded"
    assert data["services"]["database"] == "ok"
    assert data["services"]["crawler"] == "stale"


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/api/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


class TestIsDataFresh:

    def test_missing_is_stale(self):
        assert is_data_fresh(None, 26) is False

    def test_naive_timestamps_are_utc(self):
        now = datetime(2025, 3, 2, 12, tzinfo=timezone.utc)
        assert is_data_fresh(datetime(2025, 3, 1, 12), 26, now=now) is True
        assert is_data_fresh(datetime(2025, 2, 28, 12), 26, now=now) is False
