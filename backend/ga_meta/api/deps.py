"""
Shared API dependencies.
"""
from typing import Optional

from fastapi import HTTPException, Query, status

from ga_meta.models import EventFormat


def format_filter(
    format: Optional[str] = Query(None, description="Event format, e.g. standard or limited"),
) -> Optional[EventFormat]:
    """
    Parse an optional format query parameter case-insensitively.

    Raises HTTPException 400 for names that are not a known format.
    """
    if format is None or format == "":
        return None
    parsed = EventFormat.from_str(format)
    if parsed is EventFormat.UNKNOWN and format.strip().upper() != EventFormat.UNKNOWN.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown format: {format}",
        )
    return parsed
