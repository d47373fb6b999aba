"""Normalized exchange data handed from the refresh cycle to its readers."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field

UNKNOWN = "Unknown"


class TradingPair(BaseModel):
    """One base/quote market on a source. Recreated wholesale on every refresh."""

    base: str = UNKNOWN
    quote: str = UNKNOWN
    price: Decimal = Decimal("0")
    price_usd: Decimal = Decimal("0")
    volume: Decimal = Decimal("0")
    time: Optional[int] = None  # unix seconds; never <= 0 once normalized
    formatted_time: Optional[str] = None
    time_is_fallback: bool = False  # True when time was replaced by ingestion time

    @computed_field  # type: ignore[prop-decorator]
    @property
    def symbol(self) -> str:
        return f"{self.base}/{self.quote}"


class ExchangeInfo(BaseModel):
    """Descriptive metadata attached to a batch of pairs."""

    name: str = UNKNOWN
    date_live: str = UNKNOWN
    url: str = UNKNOWN

    def describe(self) -> str:
        return f"{self.name} | Founded: {self.date_live} | URL: {self.url}"


class ExchangeListing(BaseModel):
    """One entry of the exchange directory."""

    id: str
    name: str


class Snapshot(BaseModel):
    """The complete set of pairs currently considered current for one source.

    Immutable: the refresh cycle swaps the whole value, readers never mutate it.
    """

    model_config = ConfigDict(frozen=True)

    source_id: Optional[str] = None
    pairs: tuple[TradingPair, ...] = ()
    exchange_info: Optional[ExchangeInfo] = None
    fetched_at: Optional[datetime] = None

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.pairs

    def find(self, symbol: str) -> Optional[TradingPair]:
        """First pair whose symbol matches, or None."""
        return next((p for p in self.pairs if p.symbol == symbol), None)

    def describe_source(self) -> str:
        if self.exchange_info is not None:
            return self.exchange_info.describe()
        if self.source_id is not None:
            return f"Exchange ID: {self.source_id}"
        return "Exchange information not available"
