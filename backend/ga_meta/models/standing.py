"""
Standing model.
"""
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Float, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ga_meta.db.base import Base


class Standing(Base):
    """
    Represents a player's final standing in an event.

    Keyed by (event_id, player_id) where event_id is the upstream event id.
    """

    __tablename__ = "standings"
    __natural_key__ = ("event_id", "player_id")

    event_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(String(100), nullable=False)
    player_name: Mapped[str] = mapped_column(String(255), nullable=False)

    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    champion: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    draws: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    match_win_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    has_decklist: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("event_id", "player_id", name="uq_standings_event_player"),
        Index("ix_standings_event_rank", "event_id", "rank"),
        CheckConstraint("wins >= 0", name="check_standing_wins_non_negative"),
        CheckConstraint("losses >= 0", name="check_standing_losses_non_negative"),
        CheckConstraint("draws >= 0", name="check_standing_draws_non_negative"),
    )

    def calculate_win_rate(self) -> None:
        """Compute match_win_rate from the record; left as None when no matches were played."""
        total = (self.wins or 0) + (self.losses or 0) + (self.draws or 0)
        if total > 0:
            self.match_win_rate = (self.wins or 0) / total

    def __repr__(self) -> str:
        return f"<Standing {self.event_id}/{self.player_id} #{self.rank} {self.champion} ({self.wins}-{self.losses}-{self.draws})>"
