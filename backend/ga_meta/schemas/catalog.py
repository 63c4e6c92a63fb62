"""
Card and champion catalog schemas.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ChampionResponse(BaseModel):
    """Champion as stored."""
    model_config = ConfigDict(from_attributes=True)

    slug: str
    name: str
    element: Optional[str] = None
    class_name: Optional[str] = None
    image_url: Optional[str] = None
    ability_text: Optional[str] = None
    life: Optional[int] = None
    intellect: Optional[int] = None


class ChampionListResponse(BaseModel):
    champions: list[ChampionResponse]
    total: int
