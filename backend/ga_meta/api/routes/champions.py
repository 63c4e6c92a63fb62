"""
Champion catalog endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.db.session import get_db
from ga_meta.models import Champion
from ga_meta.schemas.catalog import ChampionListResponse, ChampionResponse

router = APIRouter()


@router.get("", response_model=ChampionListResponse)
async def get_champions(db: AsyncSession = Depends(get_db)):
    """Get all synced champions."""
    result = await db.execute(select(Champion).order_by(Champion.name))
    champions = result.scalars().all()
    return ChampionListResponse(
        champions=[ChampionResponse.model_validate(c) for c in champions],
        total=len(champions),
    )


@router.get("/{slug}", response_model=ChampionResponse)
async def get_champion(slug: str, db: AsyncSession = Depends(get_db)):
    """Get a champion by slug."""
    champion = await db.scalar(select(Champion).where(Champion.slug == slug))
    if not champion:
        raise HTTPException(status_code=404, detail="Champion not found")
    return ChampionResponse.model_validate(champion)
