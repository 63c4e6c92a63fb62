"""
Event, standing and decklist response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ga_meta.models.event import EventFormat


class EventResponse(BaseModel):
    """Event as stored."""
    model_config = ConfigDict(from_attributes=True)

    event_id: int
    name: str
    format: EventFormat
    status: str
    ranked: bool
    player_count: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    organizer: Optional[str] = None
    rounds: Optional[int] = None
    tier: Optional[str] = None
    has_decklists: bool
    crawled_at: datetime


class EventListResponse(BaseModel):
    """Paginated event list."""
    events: list[EventResponse]
    total: int
    page: int = 1
    page_size: int = 20
    has_more: bool = False


class StandingResponse(BaseModel):
    """Standing as stored."""
    model_config = ConfigDict(from_attributes=True)

    event_id: int
    player_id: str
    player_name: str
    rank: int
    champion: str
    wins: int
    losses: int
    draws: int
    match_win_rate: Optional[float] = None
    has_decklist: bool


class StandingListResponse(BaseModel):
    """Standings for an event."""
    standings: list[StandingResponse]
    total: int


class DecklistCardResponse(BaseModel):
    """Card entry in a decklist."""
    model_config = ConfigDict(populate_by_name=True)

    slug: str
    name: str
    quantity: int
    card_type: Optional[str] = None
    element: Optional[str] = None
    cost: Optional[int] = None


class DecklistResponse(BaseModel):
    """Decklist as stored."""
    model_config = ConfigDict(from_attributes=True)

    event_id: int
    player_id: str
    player_name: str
    champion: str
    rank: int
    main_deck: list[DecklistCardResponse] = Field(default_factory=list)
    sideboard: list[DecklistCardResponse] = Field(default_factory=list)
    main_deck_count: int
    sideboard_count: int
    card_frequencies: Optional[dict[str, int]] = None
    is_valid: bool


class DecklistListResponse(BaseModel):
    """Paginated decklist list."""
    decklists: list[DecklistResponse]
    total: int
    page: int = 1
    page_size: int = 20
    has_more: bool = False
