from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class HistoricalPrice(BaseModel):
    symbol: str
    price: Decimal
    timestamp: datetime
