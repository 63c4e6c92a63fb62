"""
Pytest configuration and fixtures.

Provides fixtures for:
- In-memory SQLite database sessions with automatic cleanup
- HTTP client bound to the API with the database dependency overridden
- Builders for events, standings and decklists
"""
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import ga_meta.models  # noqa: F401  registers tables on Base.metadata
from ga_meta.db.base import Base
from ga_meta.db.session import get_db
from ga_meta.main import app
from ga_meta.models import Decklist, Event, EventFormat, Standing

# Use SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    """Session maker bound to the test engine."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------

def make_event(
    event_id: int,
    *,
    name: Optional[str] = None,
    format: EventFormat = EventFormat.STANDARD,
    status: str = "complete",
    ranked: bool = True,
    player_count: int = 16,
    has_decklists: bool = False,
    days_ago: Optional[float] = 3,
) -> Event:
    """Build a transient Event."""
    now = datetime.now(timezone.utc)
    return Event(
        event_id=event_id,
        name=name or f"Event {event_id}",
        format=format,
        status=status,
        ranked=ranked,
        player_count=player_count,
        has_decklists=has_decklists,
        start_date=now - timedelta(days=days_ago) if days_ago is not None else None,
        crawled_at=now,
    )


def make_standing(
    event_id: int,
    player_id: str,
    *,
    rank: int,
    champion: str,
    wins: int = 0,
    losses: int = 0,
    draws: int = 0,
    has_decklist: bool = False,
) -> Standing:
    """Build a transient Standing with its win rate computed."""
    standing = Standing(
        event_id=event_id,
        player_id=player_id,
        player_name=f"Player {player_id}",
        rank=rank,
        champion=champion,
        wins=wins,
        losses=losses,
        draws=draws,
        has_decklist=has_decklist,
    )
    standing.calculate_win_rate()
    return standing


def make_decklist(
    event_id: int,
    player_id: str,
    *,
    champion: str,
    rank: int,
    main_deck: Optional[list[tuple[str, int]]] = None,
    sideboard: Optional[list[tuple[str, int]]] = None,
) -> Decklist:
    """Build a transient Decklist from (slug, quantity) pairs with derived fields computed."""
    def entries(pairs):
        return [
            {"slug": slug, "name": slug.replace("-", " ").title(), "quantity": quantity}
            for slug, quantity in (pairs or [])
        ]

    decklist = Decklist(
        event_id=event_id,
        player_id=player_id,
        player_name=f"Player {player_id}",
        champion=champion,
        rank=rank,
        main_deck=entries(main_deck),
        sideboard=entries(sideboard),
    )
    decklist.calculate_frequencies()
    return decklist


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def standing_factory():
    return make_standing


@pytest.fixture
def decklist_factory():
    return make_decklist
