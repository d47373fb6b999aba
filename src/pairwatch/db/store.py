"""Store: durable favorites, alerts, settings and price history behind one facade.

Every call opens its own short-lived session. The favorites schema generation is decided
once by SchemaManager at initialize() and carried as an explicit StoreMode; favorites
operations that still hit a missing column at runtime retry once through the
degraded, symbol-only path.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import AsyncIterator, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pairwatch.db.repos import AlertRepo, FavoriteRepo, PriceHistoryRepo, SettingRepo
from pairwatch.db.schema import SchemaManager
from pairwatch.db.session import build_session_factory
from pairwatch.domain.clock import local_now
from pairwatch.domain.enums import AlertDirection, StoreMode
from pairwatch.domain.models import FavoriteEntry, HistoricalPrice, PriceAlert, Snapshot
from pairwatch.exceptions import PersistenceError

logger = logging.getLogger(__name__)

MISSING_COLUMN_MARKERS = ("no such column", "has no column named", "no column named")


def is_missing_column(exc: BaseException) -> bool:
    message = str(exc.__cause__ or exc).lower()
    return any(marker in message for marker in MISSING_COLUMN_MARKERS)


class Store:
    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        schema: Optional[SchemaManager] = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory or build_session_factory(engine)
        self._schema = schema or SchemaManager(engine)
        self._clock = clock
        self._mode = StoreMode.DEGRADED
        self._initialized = False

    @property
    def mode(self) -> StoreMode:
        return self._mode

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> StoreMode:
        """Create/upgrade the schema, then run the favorites cleanup pass. Idempotent."""
        try:
            self._mode = await self._schema.initialize()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to initialize database: {exc}") from exc
        self._initialized = True
        if self._mode == StoreMode.DEGRADED:
            logger.warning("Store running in degraded mode: favorites are symbol-only")

        try:
            removed = await self.cleanup_favorites()
        except PersistenceError:
            logger.exception("Favorites cleanup failed during initialization")
        else:
            if removed:
                logger.info("Cleaned up %d invalid/duplicate favorites", removed)
        return self._mode

    async def reset(self) -> StoreMode:
        """Drop every table and start over with a fresh schema."""
        try:
            await self._schema.drop_all()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to reset database: {exc}") from exc
        logger.warning("Database reset: all favorites, alerts, settings and history removed")
        return await self.initialize()

    async def dispose(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise PersistenceError(str(exc)) from exc

    # -- favorites -------------------------------------------------------

    async def add_favorite(
        self,
        symbol: str,
        base: Optional[str] = None,
        quote: Optional[str] = None,
        last_price: Optional[Decimal] = None,
        last_exchange: Optional[str] = None,
    ) -> None:
        if self._mode == StoreMode.ENRICHED:
            try:
                async with self._session() as session:
                    await FavoriteRepo(session, StoreMode.ENRICHED).add(
                        symbol, base, quote, last_price, last_exchange, created_at=self._clock()
                    )
                return
            except PersistenceError as exc:
                if not is_missing_column(exc):
                    raise
                logger.warning("Enriched favorite insert failed (%s), retrying symbol-only", exc)

        async with self._session() as session:
            await FavoriteRepo(session, StoreMode.DEGRADED).add(symbol)

    async def list_favorites(self) -> list[FavoriteEntry]:
        if self._mode == StoreMode.ENRICHED:
            try:
                async with self._session() as session:
                    return await FavoriteRepo(session, StoreMode.ENRICHED).list()
            except PersistenceError as exc:
                if not is_missing_column(exc):
                    raise
                logger.warning("Enriched favorites query failed (%s), using symbol-only query", exc)

        async with self._session() as session:
            return await FavoriteRepo(session, StoreMode.DEGRADED).list()

    async def remove_favorite(self, symbol: str) -> int:
        async with self._session() as session:
            removed = await FavoriteRepo(session, self._mode).remove(symbol)
        logger.debug("Removed %d favorite row(s) for %s", removed, symbol)
        return removed

    async def favorite_symbols(self) -> list[str]:
        async with self._session() as session:
            return await FavoriteRepo(session, self._mode).symbols()

    async def is_favorite(self, symbol: str) -> bool:
        async with self._session() as session:
            return await FavoriteRepo(session, self._mode).exists(symbol)

    async def cleanup_favorites(self) -> int:
        async with self._session() as session:
            return await FavoriteRepo(session, self._mode).cleanup()

    async def count_favorites(self) -> int:
        async with self._session() as session:
            return await FavoriteRepo(session, self._mode).count()

    # -- alerts ----------------------------------------------------------

    async def add_alert(self, alert: PriceAlert) -> None:
        async with self._session() as session:
            await AlertRepo(session).add(alert)

    async def list_alerts(self, enabled_only: bool = True) -> list[PriceAlert]:
        async with self._session() as session:
            return await AlertRepo(session).list(enabled_only=enabled_only)

    async def alert_exists(
        self, symbol: str, target_price: Decimal, direction: AlertDirection, enabled: bool = True
    ) -> bool:
        async with self._session() as session:
            return await AlertRepo(session).exists(symbol, target_price, direction, enabled)

    async def delete_alert(self, alert: PriceAlert) -> int:
        async with self._session() as session:
            return await AlertRepo(session).delete(alert.identity)

    async def set_alert_enabled(self, alert: PriceAlert, enabled: bool) -> int:
        async with self._session() as session:
            return await AlertRepo(session).set_enabled(alert.identity, enabled)

    async def clear_alerts(self) -> int:
        async with self._session() as session:
            return await AlertRepo(session).clear()

    # -- settings --------------------------------------------------------

    async def get_setting(self, key: str) -> Optional[str]:
        async with self._session() as session:
            return await SettingRepo(session).get(key)

    async def set_setting(self, key: str, value: str) -> None:
        async with self._session() as session:
            await SettingRepo(session).set(key, value)

    async def delete_setting(self, key: str) -> bool:
        async with self._session() as session:
            return await SettingRepo(session).delete(key)

    async def all_settings(self) -> dict[str, str]:
        async with self._session() as session:
            return await SettingRepo(session).all()

    # -- price history ---------------------------------------------------

    async def save_historical_price(self, price: HistoricalPrice) -> None:
        async with self._session() as session:
            await PriceHistoryRepo(session).add(price.symbol, price.price, price.timestamp)

    async def save_snapshot_prices(self, snapshot: Snapshot) -> int:
        """Append every pair's USD price, stamped with the snapshot's fetch time."""
        at = snapshot.fetched_at or self._clock()
        rows = [HistoricalPrice(symbol=p.symbol, price=p.price_usd, timestamp=at) for p in snapshot.pairs]
        async with self._session() as session:
            return await PriceHistoryRepo(session).add_many(rows)

    async def get_historical_prices(self, symbol: str, start: datetime, end: datetime) -> list[HistoricalPrice]:
        async with self._session() as session:
            return await PriceHistoryRepo(session).between(symbol, start, end)
