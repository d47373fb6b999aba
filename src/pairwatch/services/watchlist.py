"""Watchlist: favorites and alerts as the outer layers see them.

Keeps the Store (durable state), the AlertEngine (working set) and the current Snapshot
(live prices) in step for every user action.
"""

import logging
from decimal import Decimal
from typing import Optional

from pairwatch.alerts.engine import AlertEngine
from pairwatch.db.store import Store
from pairwatch.domain.enums import AlertDirection
from pairwatch.domain.models import FavoriteEntry, PriceAlert, Snapshot, TradingPair
from pairwatch.exceptions import DuplicateAlertError, InvalidAlertError
from pairwatch.services.snapshot import SnapshotHolder

logger = logging.getLogger(__name__)


def default_alert_message(symbol: str, target_price: Decimal, direction: AlertDirection) -> str:
    return f"Alert for {symbol} when price goes {direction.value.lower()} ${target_price:,.2f}"


def _exchange_name(snapshot: Snapshot) -> Optional[str]:
    if snapshot.exchange_info is not None:
        return snapshot.exchange_info.name
    return snapshot.source_id


def _overlay(entry: FavoriteEntry, pair: TradingPair, exchange: Optional[str]) -> FavoriteEntry:
    return entry.model_copy(
        update={
            "base": pair.base,
            "quote": pair.quote,
            "last_price": pair.price_usd,
            "last_exchange": exchange or entry.last_exchange,
        }
    )


class Watchlist:
    def __init__(self, store: Store, engine: AlertEngine, holder: SnapshotHolder) -> None:
        self._store = store
        self._engine = engine
        self._holder = holder

    # -- favorites -------------------------------------------------------

    async def add_favorite(self, symbol: str) -> FavoriteEntry:
        """Save symbol, enriched with what the current snapshot knows about it."""
        symbol = symbol.strip()
        if not symbol:
            raise ValueError("Symbol must not be empty")

        snapshot = self._holder.current
        pair = snapshot.find(symbol)
        if pair is None:
            await self._store.add_favorite(symbol)
            logger.info("Added favorite %s (not in current snapshot)", symbol)
            return FavoriteEntry(symbol=symbol)

        exchange = _exchange_name(snapshot)
        await self._store.add_favorite(
            symbol, base=pair.base, quote=pair.quote, last_price=pair.price_usd, last_exchange=exchange
        )
        logger.info("Added favorite %s", symbol)
        return FavoriteEntry(
            symbol=symbol, base=pair.base, quote=pair.quote, last_price=pair.price_usd, last_exchange=exchange
        )

    async def remove_favorite(self, symbol: str) -> int:
        return await self._store.remove_favorite(symbol)

    async def list_favorites(self) -> list[FavoriteEntry]:
        """Stored favorites with live prices from the current snapshot overlaid."""
        favorites = await self._store.list_favorites()
        snapshot = self._holder.current
        if snapshot.is_empty:
            return favorites

        exchange = _exchange_name(snapshot)
        result: list[FavoriteEntry] = []
        for entry in favorites:
            pair = snapshot.find(entry.symbol)
            result.append(_overlay(entry, pair, exchange) if pair is not None else entry)
        return result

    async def cleanup_favorites(self) -> int:
        return await self._store.cleanup_favorites()

    # -- alerts ----------------------------------------------------------

    async def create_alert(
        self,
        symbol: str,
        target_price: Decimal,
        direction: AlertDirection,
        message: Optional[str] = None,
    ) -> PriceAlert:
        symbol = symbol.strip()
        if not symbol:
            raise InvalidAlertError("Symbol must not be empty")
        if target_price <= 0:
            raise InvalidAlertError("Target price must be greater than zero")
        if await self._store.alert_exists(symbol, target_price, direction, enabled=True):
            raise DuplicateAlertError(
                f"An alert for {symbol} at ${target_price:,.2f} ({direction.value.lower()}) already exists"
            )

        alert = PriceAlert(
            symbol=symbol,
            target_price=target_price,
            direction=direction,
            message=message or default_alert_message(symbol, target_price, direction),
        )
        await self._store.add_alert(alert)
        self._engine.track(alert)
        logger.info("Created alert: %s", alert.message)
        return alert

    def would_trigger_immediately(self, symbol: str, target_price: Decimal, direction: AlertDirection) -> bool:
        """True when the current snapshot already satisfies the condition."""
        if target_price <= 0:
            return False
        pair = self._holder.current.find(symbol.strip())
        if pair is None:
            return False
        probe = PriceAlert(symbol=symbol, target_price=target_price, direction=direction)
        return probe.is_triggered_by(pair.price_usd)

    async def delete_alert(self, alert: PriceAlert) -> int:
        removed = await self._store.delete_alert(alert)
        self._engine.untrack(alert)
        return removed

    async def set_alert_enabled(self, alert: PriceAlert, enabled: bool) -> int:
        updated = await self._store.set_alert_enabled(alert, enabled)
        if not updated:
            return 0
        if enabled:
            self._engine.track(alert.model_copy(update={"enabled": True}))
        else:
            self._engine.untrack(alert)
        return updated

    async def clear_alerts(self) -> int:
        removed = await self._store.clear_alerts()
        self._engine.clear()
        logger.info("Cleared %d alert(s)", removed)
        return removed

    async def list_alerts(self, enabled_only: bool = False) -> list[PriceAlert]:
        return await self._store.list_alerts(enabled_only=enabled_only)

    # -- settings --------------------------------------------------------

    async def get_setting(self, key: str) -> Optional[str]:
        return await self._store.get_setting(key)

    async def set_setting(self, key: str, value: str) -> None:
        await self._store.set_setting(key, value)

    async def delete_setting(self, key: str) -> bool:
        return await self._store.delete_setting(key)
