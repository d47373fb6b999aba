from datetime import datetime
from decimal import Decimal

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from pairwatch.db.models import HistoricalPriceRecord
from pairwatch.domain.models import HistoricalPrice


class PriceHistoryRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, symbol: str, price: Decimal, timestamp: datetime) -> None:
        self._session.add(HistoricalPriceRecord(symbol=symbol, price=price, timestamp=timestamp))
        await self._session.flush()

    async def add_many(self, rows: list[HistoricalPrice]) -> int:
        if not rows:
            return 0
        await self._session.execute(
            insert(HistoricalPriceRecord),
            [{"symbol": r.symbol, "price": r.price, "timestamp": r.timestamp} for r in rows],
        )
        return len(rows)

    async def between(self, symbol: str, start: datetime, end: datetime) -> list[HistoricalPrice]:
        result = await self._session.execute(
            select(HistoricalPriceRecord)
            .where(
                HistoricalPriceRecord.symbol == symbol,
                HistoricalPriceRecord.timestamp.between(start, end),
            )
            .order_by(HistoricalPriceRecord.timestamp)
        )
        return [
            HistoricalPrice(symbol=r.symbol, price=r.price, timestamp=r.timestamp)
            for r in result.scalars().all()
        ]
