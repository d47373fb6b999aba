"""Favorites table in its two generations.

`basic_favorites` is the symbol-only layout every database starts from and the only
one degraded mode touches. `FavoriteRecord` is the enriched layout the schema manager
upgrades to.
"""

from datetime import datetime
from decimal import Decimal
from typing import NamedTuple, Optional

from sqlalchemy import Column, DateTime, Integer, MetaData, Numeric, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from pairwatch.db.session import Base

FAVORITES_TABLE = "Favorites"

basic_metadata = MetaData()

basic_favorites = Table(
    FAVORITES_TABLE,
    basic_metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("symbol", Text, nullable=False, unique=True),
)


class FavoriteRecord(Base):
    __tablename__ = FAVORITES_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    base: Mapped[Optional[str]] = mapped_column(Text, default=None)
    quote: Mapped[Optional[str]] = mapped_column(Text, default=None)
    last_price: Mapped[Optional[Decimal]] = mapped_column("lastPrice", Numeric(28, 10), default=None)
    last_exchange: Mapped[Optional[str]] = mapped_column("lastExchange", Text, default=None)
    created_at: Mapped[Optional[datetime]] = mapped_column("createdAt", DateTime, default=None)


class EnrichedColumn(NamedTuple):
    name: str
    ddl: str


# Upgrade steps, applied in order; each one is independent of the others.
ENRICHED_FAVORITE_COLUMNS: tuple[EnrichedColumn, ...] = (
    EnrichedColumn("base", "TEXT"),
    EnrichedColumn("quote", "TEXT"),
    EnrichedColumn("lastPrice", "NUMERIC(28, 10)"),
    EnrichedColumn("lastExchange", "TEXT"),
    EnrichedColumn("createdAt", "DATETIME"),  # no CURRENT_TIMESTAMP default: SQLite rejects it on ADD COLUMN
)
