from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, func, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pairwatch.db.models import FavoriteRecord, basic_favorites
from pairwatch.domain.enums import StoreMode
from pairwatch.domain.models import UNKNOWN, FavoriteEntry, split_symbol


class FavoriteRepo:
    """Favorites access for one schema generation.

    ENRICHED reads and writes the full column set; DEGRADED touches only id/symbol and
    reconstructs base/quote from the symbol.
    """

    def __init__(self, session: AsyncSession, mode: StoreMode) -> None:
        self._session = session
        self._mode = mode

    async def add(
        self,
        symbol: str,
        base: Optional[str] = None,
        quote: Optional[str] = None,
        last_price: Optional[Decimal] = None,
        last_exchange: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        if self._mode == StoreMode.DEGRADED:
            # OR IGNORE: replacing the row would wipe enriched columns another writer set
            await self._session.execute(insert(basic_favorites).prefix_with("OR IGNORE").values(symbol=symbol))
            return

        result = await self._session.execute(select(FavoriteRecord).where(FavoriteRecord.symbol == symbol))
        record = result.scalars().first()
        if record is None:
            record = FavoriteRecord(symbol=symbol)
            self._session.add(record)
        record.base = base
        record.quote = quote
        record.last_price = last_price
        record.last_exchange = last_exchange
        record.created_at = created_at
        await self._session.flush()

    async def remove(self, symbol: str) -> int:
        """Delete every row with this symbol (duplicates included)."""
        result = await self._session.execute(delete(basic_favorites).where(basic_favorites.c.symbol == symbol))
        return result.rowcount or 0

    async def symbols(self) -> list[str]:
        result = await self._session.execute(select(basic_favorites.c.symbol).order_by(basic_favorites.c.id))
        return [row for row in result.scalars().all() if row is not None]

    async def exists(self, symbol: str) -> bool:
        result = await self._session.execute(
            select(basic_favorites.c.id).where(basic_favorites.c.symbol == symbol).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def list(self) -> list[FavoriteEntry]:
        if self._mode == StoreMode.DEGRADED:
            return [self._from_symbol(symbol) for symbol in await self.symbols()]

        result = await self._session.execute(
            select(FavoriteRecord).order_by(FavoriteRecord.created_at.desc(), FavoriteRecord.id.desc())
        )
        return [self._from_record(record) for record in result.scalars().all()]

    async def cleanup(self) -> int:
        """Remove duplicate rows (keeping the lowest id per symbol) and malformed symbols."""
        t = basic_favorites
        keep = select(func.min(t.c.id)).group_by(t.c.symbol)
        result = await self._session.execute(
            delete(t).where(
                or_(
                    t.c.id.not_in(keep),
                    t.c.symbol.is_(None),
                    t.c.symbol == "",
                    t.c.symbol.like("%/"),
                    t.c.symbol.like("/%"),
                )
            )
        )
        return result.rowcount or 0

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(basic_favorites))
        return result.scalar_one()

    @staticmethod
    def _from_symbol(symbol: str) -> FavoriteEntry:
        base, quote = split_symbol(symbol)
        return FavoriteEntry(symbol=symbol, base=base, quote=quote)

    @staticmethod
    def _from_record(record: FavoriteRecord) -> FavoriteEntry:
        base, quote = record.base, record.quote
        if not base or not quote or base == UNKNOWN or quote == UNKNOWN:
            split_base, split_quote = split_symbol(record.symbol)
            base = base if base and base != UNKNOWN else split_base
            quote = quote if quote and quote != UNKNOWN else split_quote
        return FavoriteEntry(
            symbol=record.symbol,
            base=base,
            quote=quote,
            last_price=record.last_price,
            last_exchange=record.last_exchange,
            created_at=record.created_at,
        )
