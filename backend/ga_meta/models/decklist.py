"""
Decklist model.

Card entries are stored inline as JSON lists of
{"slug", "name", "quantity", "card_type", "element", "cost"} objects.
"""
from typing import Any, Optional

from sqlalchemy import JSON, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ga_meta.db.base import Base

MIN_MAIN_DECK_SIZE = 60
MAX_SIDEBOARD_SIZE = 15


def count_cards(cards: list[dict[str, Any]]) -> int:
    """Sum of quantities in a card section."""
    return sum(int(card.get("quantity", 0)) for card in cards)


def card_frequencies(
    main_deck: list[dict[str, Any]],
    sideboard: list[dict[str, Any]],
) -> dict[str, int]:
    """Total quantity per card slug across main deck and sideboard."""
    frequencies: dict[str, int] = {}
    for card in [*main_deck, *sideboard]:
        slug = card["slug"]
        frequencies[slug] = frequencies.get(slug, 0) + int(card.get("quantity", 0))
    return frequencies


class Decklist(Base):
    """
    Represents a player's decklist for an event.

    Keyed by (event_id, player_id). The count fields and card_frequencies are
    derived once at ingestion by calculate_frequencies() and stored as-is.
    """

    __tablename__ = "decklists"
    __natural_key__ = ("event_id", "player_id")

    event_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(String(100), nullable=False)
    player_name: Mapped[str] = mapped_column(String(255), nullable=False)
    champion: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)

    main_deck: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    sideboard: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    main_deck_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sideboard_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    card_frequencies: Mapped[Optional[dict[str, int]]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("event_id", "player_id", name="uq_decklists_event_player"),
        Index("ix_decklists_event_champion", "event_id", "champion"),
    )

    def calculate_frequencies(self) -> None:
        """Derive the two count fields and the per-slug frequency map."""
        main_deck = self.main_deck or []
        sideboard = self.sideboard or []
        self.main_deck_count = count_cards(main_deck)
        self.sideboard_count = count_cards(sideboard)
        self.card_frequencies = card_frequencies(main_deck, sideboard)

    @property
    def is_valid(self) -> bool:
        """Advisory deck-size check; not enforced on write."""
        return self.main_deck_count >= MIN_MAIN_DECK_SIZE and self.sideboard_count <= MAX_SIDEBOARD_SIZE

    def __repr__(self) -> str:
        return f"<Decklist {self.event_id}/{self.player_id} {self.champion} ({self.main_deck_count}+{self.sideboard_count})>"
