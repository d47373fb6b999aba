from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from pairwatch.domain.models.market import UNKNOWN


class FavoriteEntry(BaseModel):
    """A saved symbol. Enriched columns are None when the Store runs degraded."""

    symbol: str
    base: str = UNKNOWN
    quote: str = UNKNOWN
    last_price: Optional[Decimal] = None
    last_exchange: Optional[str] = None
    created_at: Optional[datetime] = None


def split_symbol(symbol: str) -> tuple[str, str]:
    """Reconstruct (base, quote) from "BASE/QUOTE", defaulting empty sides to "Unknown"."""
    parts = symbol.split("/")
    base = parts[0] if parts[0] else UNKNOWN
    quote = parts[1] if len(parts) > 1 and parts[1] else UNKNOWN
    return base, quote
