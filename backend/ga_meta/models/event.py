"""
Event and crawler checkpoint models.

Events are discovered by probing upstream ids one at a time; each successful
probe upserts an Event row keyed by the upstream id. CrawlerState rows are
append-only checkpoints used to compute where the next crawl resumes.
"""
import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ga_meta.db.base import Base


class EventFormat(str, enum.Enum):
    """Event format as reported upstream."""
    STANDARD = "STANDARD"
    LIMITED = "LIMITED"
    SEALED = "SEALED"
    DRAFT = "DRAFT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "EventFormat":
        """Parse a format name case-insensitively; anything unrecognised is UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN


# Events above this size are worth a cascade even without published decklists
LARGE_EVENT_PLAYER_COUNT = 60


class Event(Base):
    """
    Represents a tournament event from the Omnidex API.

    Created or overwritten on every successful fetch; never deleted.
    """

    __tablename__ = "events"
    __natural_key__ = ("event_id",)

    # Identity
    event_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    format: Mapped[EventFormat] = mapped_column(
        Enum(EventFormat, name="event_format", native_enum=False, length=20),
        nullable=False,
        default=EventFormat.UNKNOWN,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False)  # complete, active, upcoming
    ranked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    player_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Schedule
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Details
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    organizer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    rounds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    tier: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    has_decklists: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    crawled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_events_status_ranked_format", "status", "ranked", "format"),
    )

    def is_interesting(self) -> bool:
        """
        Whether the event justifies fetching standings and decklists.

        Completed, ranked, and either publishes decklists or is large.
        """
        return (
            (self.status or "").lower() == "complete"
            and bool(self.ranked)
            and (bool(self.has_decklists) or (self.player_count or 0) > LARGE_EVENT_PLAYER_COUNT)
        )

    def __repr__(self) -> str:
        return f"<Event {self.event_id} {self.name} ({self.format.value if self.format else '?'})>"


class CrawlerState(Base):
    """
    Append-only crawl checkpoint.

    The row with the latest last_crawl is authoritative for resuming.
    """

    __tablename__ = "crawler_states"

    last_event_id: Mapped[int] = mapped_column(Integer, nullable=False)
    total_events: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_crawl: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    crawl_type: Mapped[str] = mapped_column(String(50), nullable=False)  # historical, incremental

    def __repr__(self) -> str:
        return f"<CrawlerState {self.crawl_type} last={self.last_event_id} total={self.total_events}>"
