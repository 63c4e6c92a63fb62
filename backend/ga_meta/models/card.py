"""
Card and champion catalog models.

Reference data populated by the catalog sync; aggregation only reads names.
"""
from typing import Optional

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ga_meta.db.base import Base


class Card(Base):
    """A Grand Archive card, keyed by slug."""

    __tablename__ = "cards"
    __natural_key__ = ("slug",)

    slug: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    card_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    element: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    classes: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    subtypes: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    cost: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    reserve_cost: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    power: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    life_modifier: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    card_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    flavor_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Printing
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    set_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    card_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    rarity: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    artist: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    banned_standard: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    banned_limited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Card {self.slug} ({self.name})>"


class Champion(Base):
    """A champion, keyed by the slug used in standings and decklists."""

    __tablename__ = "champions"
    __natural_key__ = ("slug",)

    slug: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    element: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    class_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    ability_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    life: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    intellect: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Champion {self.slug} ({self.name})>"
