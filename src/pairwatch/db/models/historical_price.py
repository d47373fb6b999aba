"""Point-in-time USD prices recorded from published snapshots."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from pairwatch.db.session import Base


class HistoricalPriceRecord(Base):
    __tablename__ = "HistoricalPrices"
    __table_args__ = (Index("idx_historical_symbol_timestamp", "symbol", "timestamp"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(28, 10), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
