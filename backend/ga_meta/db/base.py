"""
SQLAlchemy Base class for all models.

Corpus tables are keyed by upstream identifiers. A model declares them in
`__natural_key__`; the surrogate `id` and the timestamps below stay local
to this database and are never copied between rows.
"""
from datetime import datetime
from typing import Any, ClassVar

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

MANAGED_COLUMNS = frozenset({"id", "created_at", "updated_at"})


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    # Upstream identity columns; empty for append-only tables
    __natural_key__: ClassVar[tuple[str, ...]] = ()

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def natural_key(self) -> dict[str, Any]:
        """Upstream identity of this row, e.g. {"event_id": 7, "player_id": "p1"}."""
        if not self.__natural_key__:
            raise TypeError(f"{type(self).__name__} has no natural key")
        return {name: getattr(self, name) for name in self.__natural_key__}

    def upstream_values(self) -> dict[str, Any]:
        """
        Column values that came from upstream or were derived at ingestion.

        None is dropped for non-nullable columns so column defaults still apply.
        """
        values = {}
        for column in self.__table__.columns:
            if column.key in MANAGED_COLUMNS:
                continue
            value = getattr(self, column.key)
            if value is None and not column.nullable:
                continue
            values[column.key] = value
        return values
