"""
Meta aggregation schemas.

Percentages are expressed on a 0-100 scale.
"""
from typing import Optional

from pydantic import BaseModel, Field


class MetaBreakdown(BaseModel):
    """A champion's share of decklists within a selection."""
    champion: str
    deck_count: int
    meta_percentage: float = Field(..., ge=0, le=100)
    avg_placement: float
    win_rate: Optional[float] = None  # Needs match data, not tracked yet
    top_8_count: int
    top_8_percentage: float = Field(..., ge=0, le=100)


class ChampionPerformance(BaseModel):
    """Standings-based performance of a champion."""
    champion: str
    total_appearances: int
    total_events: int
    avg_placement: float
    win_rate: float
    top_8_rate: float = Field(..., ge=0, le=100)
    top_16_rate: float = Field(..., ge=0, le=100)
    conversion_rate: float = Field(..., ge=0, le=100)  # Same as top_8_rate


class CardPerformance(BaseModel):
    """Decklist-based popularity and placement of a card."""
    slug: str
    name: str
    deck_count: int
    total_quantity: int
    meta_percentage: float = Field(..., ge=0, le=100)
    avg_quantity: float
    avg_placement: Optional[float] = None
    win_rate: Optional[float] = None


class MetaBreakdownResponse(BaseModel):
    """Meta breakdown list."""
    breakdown: list[MetaBreakdown]
    total: int


class ChampionPerformanceResponse(BaseModel):
    """Champion performance list."""
    champions: list[ChampionPerformance]
    total: int


class CardPerformanceResponse(BaseModel):
    """Card performance list."""
    cards: list[CardPerformance]
    total: int
