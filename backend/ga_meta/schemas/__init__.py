"""
Pydantic schemas for upstream payloads and API responses.
"""
from ga_meta.schemas.catalog import ChampionListResponse, ChampionResponse
from ga_meta.schemas.event import (
    DecklistListResponse,
    DecklistResponse,
    EventListResponse,
    EventResponse,
    StandingListResponse,
    StandingResponse,
)
from ga_meta.schemas.meta import (
    CardPerformance,
    CardPerformanceResponse,
    ChampionPerformance,
    ChampionPerformanceResponse,
    MetaBreakdown,
    MetaBreakdownResponse,
)

__all__ = [
    "ChampionResponse",
    "ChampionListResponse",
    "EventResponse",
    "EventListResponse",
    "StandingResponse",
    "StandingListResponse",
    "DecklistResponse",
    "DecklistListResponse",
    "MetaBreakdown",
    "MetaBreakdownResponse",
    "ChampionPerformance",
    "ChampionPerformanceResponse",
    "CardPerformance",
    "CardPerformanceResponse",
]
