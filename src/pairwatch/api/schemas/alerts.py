from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pairwatch.domain.enums import AlertDirection
from pairwatch.domain.models import PriceAlert


class AlertCreate(BaseModel):
    symbol: str
    target_price: Decimal
    direction: AlertDirection
    message: Optional[str] = None


class AlertIdentityBody(BaseModel):
    """An alert has no surrogate key; these four fields identify it."""

    symbol: str
    target_price: Decimal = Field(gt=0)
    direction: AlertDirection
    created_at: datetime

    def to_alert(self, enabled: bool = True) -> PriceAlert:
        return PriceAlert(
            symbol=self.symbol,
            target_price=self.target_price,
            direction=self.direction,
            created_at=self.created_at,
            enabled=enabled,
        )


class AlertEnabledUpdate(AlertIdentityBody):
    enabled: bool


class AlertCreated(BaseModel):
    alert: PriceAlert
    would_trigger_immediately: bool


class AlertList(BaseModel):
    alerts: list[PriceAlert]
    total: int
