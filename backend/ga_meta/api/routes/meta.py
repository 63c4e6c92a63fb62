"""
Meta aggregation endpoints.

Rollups are computed on request from the stored corpus.
"""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.api.deps import format_filter
from ga_meta.core.exceptions import AggregationError
from ga_meta.db.session import get_db
from ga_meta.models import EventFormat
from ga_meta.schemas.meta import (
    CardPerformanceResponse,
    ChampionPerformanceResponse,
    MetaBreakdownResponse,
)
from ga_meta.services.meta_analysis import MetaAnalysisService

router = APIRouter()
cards_router = APIRouter()
logger = structlog.get_logger()


def _internal_error(e: AggregationError) -> HTTPException:
    logger.error("Meta aggregation failed", error=str(e))
    return HTTPException(status_code=500, detail="Failed to calculate meta statistics")


@router.get("/breakdown", response_model=MetaBreakdownResponse)
async def get_meta_breakdown(
    event_format: Optional[EventFormat] = Depends(format_filter),
    days: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
):
    """
    Champion share of decklists in completed, ranked events.

    - **format**: Event format
    - **days**: Events starting within the last N days
    """
    try:
        breakdown = await MetaAnalysisService(db).calculate_meta_breakdown(format=event_format, days=days)
    except AggregationError as e:
        raise _internal_error(e)
    return MetaBreakdownResponse(breakdown=breakdown, total=len(breakdown))


@router.get("/champion-performance", response_model=ChampionPerformanceResponse)
async def get_champion_performance(
    event_format: Optional[EventFormat] = Depends(format_filter),
    days: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
):
    """Champion placement and win rate from standings."""
    try:
        champions = await MetaAnalysisService(db).calculate_champion_performance(days=days, format=event_format)
    except AggregationError as e:
        raise _internal_error(e)
    return ChampionPerformanceResponse(champions=champions, total=len(champions))


@cards_router.get("/performance", response_model=CardPerformanceResponse)
async def get_card_performance(
    event_format: Optional[EventFormat] = Depends(format_filter),
    days: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """
    Most played cards in completed, ranked events.

    - **limit**: Maximum number of cards returned
    """
    try:
        cards = await MetaAnalysisService(db).calculate_card_performance(
            format=event_format,
            days=days,
            limit=limit,
        )
    except AggregationError as e:
        raise _internal_error(e)
    return CardPerformanceResponse(cards=cards, total=len(cards))
