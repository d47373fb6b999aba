"""Price alert domain types."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pairwatch.domain.clock import local_now
from pairwatch.domain.enums import AlertDirection

AlertIdentity = tuple[str, Decimal, AlertDirection, datetime]


class PriceAlert(BaseModel):
    """A user-defined threshold on one symbol's USD price.

    There is no surrogate key: (symbol, target_price, direction, created_at) identifies an alert.
    """

    symbol: str
    target_price: Decimal = Field(gt=0)
    direction: AlertDirection
    enabled: bool = True
    created_at: datetime = Field(default_factory=local_now)
    message: Optional[str] = None

    @property
    def identity(self) -> AlertIdentity:
        return (self.symbol, self.target_price, self.direction, self.created_at)

    def is_triggered_by(self, price_usd: Decimal) -> bool:
        """Inclusive on both sides: an alert set exactly at the current price fires."""
        if self.direction == AlertDirection.ABOVE:
            return price_usd >= self.target_price
        return price_usd <= self.target_price


class AlertTriggered(BaseModel):
    """One-time notification emitted after a triggered alert was deleted from the Store."""

    symbol: str
    target_price: Decimal
    direction: AlertDirection
    price_usd: Decimal
    triggered_at: datetime
    message: Optional[str] = None

    def describe(self) -> str:
        return (
            f"PRICE ALERT TRIGGERED! {self.symbol} target ${self.target_price:,.2f} "
            f"({self.direction.value.lower()}), current ${self.price_usd:,.2f}. Alert has been removed."
        )
