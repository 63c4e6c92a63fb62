"""
Pydantic models for upstream API payloads.

Every upstream endpoint wraps its body in a {"data": ...} envelope; a null or
missing "data" on a 2xx response means the resource is empty.
"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Upstream response envelope."""
    data: Optional[T] = None


class EventData(BaseModel):
    """Event payload from /events/{id}."""
    id: int
    name: str
    format: str
    status: str
    ranked: bool = False
    player_count: int = 0
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    location: Optional[str] = None
    organizer: Optional[str] = None
    rounds: Optional[int] = None
    tier: Optional[str] = None


class StandingData(BaseModel):
    """One row of /events/{id}/standings."""
    player_id: str
    player_name: str
    rank: int
    champion: str
    wins: int = 0
    losses: int = 0
    draws: int = 0
    has_decklist: Optional[bool] = None


class StatisticsData(BaseModel):
    """Payload of /events/{id}/statistics."""
    total_players: int
    has_decklists: bool


class DeckCardData(BaseModel):
    """A card entry inside a decklist payload."""
    model_config = ConfigDict(populate_by_name=True)

    slug: str
    name: str
    quantity: int
    card_type: Optional[str] = Field(default=None, alias="type")
    element: Optional[str] = None
    cost: Optional[int] = None


class DecklistData(BaseModel):
    """Payload of /events/{id}/decklist?player=..."""
    player_id: str
    player_name: str
    champion: str
    rank: int
    main_deck: list[DeckCardData]
    sideboard: Optional[list[DeckCardData]] = None


class CardData(BaseModel):
    """Payload of /cards/{slug}."""
    model_config = ConfigDict(populate_by_name=True)

    slug: str
    name: str
    card_type: Optional[str] = Field(default=None, alias="type")
    element: Optional[str] = None
    classes: Optional[list[str]] = None
    cost: Optional[int] = None
    reserve_cost: Optional[int] = None
    power: Optional[int] = None
    life_modifier: Optional[int] = None
    effect_text: Optional[str] = None
    flavor_text: Optional[str] = None
    image_url: Optional[str] = None
    set_name: Optional[str] = Field(default=None, alias="set")
    collector_number: Optional[str] = None
    rarity: Optional[str] = None
    artist: Optional[str] = None
    subtypes: Optional[list[str]] = None
