"""
Decklist endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.db.session import get_db
from ga_meta.models import Decklist
from ga_meta.schemas.event import DecklistListResponse, DecklistResponse

router = APIRouter()


@router.get("", response_model=DecklistListResponse)
async def get_decklists(
    event_id: Optional[int] = None,
    champion: Optional[str] = None,
    player_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Get decklists with optional filters.

    - **event_id**: Upstream event id
    - **champion**: Champion slug
    - **player_id**: Upstream player id
    """
    query = select(Decklist)

    if event_id is not None:
        query = query.where(Decklist.event_id == event_id)
    if champion:
        query = query.where(Decklist.champion == champion)
    if player_id:
        query = query.where(Decklist.player_id == player_id)

    count_query = select(func.count()).select_from(query.subquery())
    total = await db.scalar(count_query) or 0

    query = query.order_by(
        Decklist.event_id.desc(),
        Decklist.rank,
    ).offset((page - 1) * page_size).limit(page_size)

    result = await db.execute(query)
    decklists = result.scalars().all()

    return DecklistListResponse(
        decklists=[DecklistResponse.model_validate(d) for d in decklists],
        total=total,
        page=page,
        page_size=page_size,
        has_more=(page * page_size) < total,
    )
