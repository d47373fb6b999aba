from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from pairwatch.domain.models import ExchangeInfo, Snapshot, TradingPair


class SnapshotResponse(BaseModel):
    source_id: Optional[str] = None
    source: str
    exchange_info: Optional[ExchangeInfo] = None
    fetched_at: Optional[datetime] = None
    pairs: list[TradingPair]
    total: int

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotResponse":
        return cls(
            source_id=snapshot.source_id,
            source=snapshot.describe_source(),
            exchange_info=snapshot.exchange_info,
            fetched_at=snapshot.fetched_at,
            pairs=list(snapshot.pairs),
            total=len(snapshot.pairs),
        )
