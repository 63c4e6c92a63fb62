"""
Event and standing endpoints.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ga_meta.api.deps import format_filter
from ga_meta.db.session import get_db
from ga_meta.models import Event, EventFormat, Standing
from ga_meta.repositories import CorpusRepository
from ga_meta.schemas.event import (
    EventListResponse,
    EventResponse,
    StandingListResponse,
    StandingResponse,
)

router = APIRouter()


@router.get("", response_model=EventListResponse)
async def get_events(
    event_format: Optional[EventFormat] = Depends(format_filter),
    status: Optional[str] = None,
    ranked: Optional[bool] = None,
    days: Optional[int] = Query(None, ge=1),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Get events with optional filters, most recent first.

    - **format**: Event format (standard, limited, ...)
    - **status**: Upstream status, e.g. complete
    - **ranked**: Only ranked or only unranked events
    - **days**: Events starting within the last N days
    """
    query = select(Event)

    if event_format is not None:
        query = query.where(Event.format == event_format)

    if status:
        query = query.where(func.lower(Event.status) == status.lower())

    if ranked is not None:
        query = query.where(Event.ranked.is_(ranked))

    if days is not None:
        cutoff_date = datetime.now(timezone.utc) - timedelta(days=days)
        query = query.where(Event.start_date >= cutoff_date)

    count_query = select(func.count()).select_from(query.subquery())
    total = await db.scalar(count_query) or 0

    query = query.order_by(
        Event.start_date.desc().nulls_last(),
        Event.event_id.desc(),
    ).offset((page - 1) * page_size).limit(page_size)

    result = await db.execute(query)
    events = result.scalars().all()

    return EventListResponse(
        events=[EventResponse.model_validate(e) for e in events],
        total=total,
        page=page,
        page_size=page_size,
        has_more=(page * page_size) < total,
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get an event by its upstream id."""
    event = await CorpusRepository(db).get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return EventResponse.model_validate(event)


@router.get("/{event_id}/standings", response_model=StandingListResponse)
async def get_event_standings(
    event_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get final standings for an event, best rank first."""
    result = await db.execute(
        select(Standing)
        .where(Standing.event_id == event_id)
        .order_by(Standing.rank, Standing.player_name)
    )
    standings = result.scalars().all()

    return StandingListResponse(
        standings=[StandingResponse.model_validate(s) for s in standings],
        total=len(standings),
    )
