"""Stored price alerts. Identity is (symbol, targetPrice, alertType, createdAt), not id."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pairwatch.db.session import Base
from pairwatch.domain.enums import AlertDirection


class PriceAlertRecord(Base):
    __tablename__ = "PriceAlerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(Text, nullable=False)
    target_price: Mapped[Decimal] = mapped_column("targetPrice", Numeric(28, 10), nullable=False)
    alert_type: Mapped[str] = mapped_column("alertType", String(10), nullable=False)  # AlertDirection value
    is_enabled: Mapped[bool] = mapped_column("isEnabled", Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime, nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, default=None)

    @property
    def direction(self) -> AlertDirection:
        return AlertDirection(self.alert_type)
