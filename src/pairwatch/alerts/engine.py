"""AlertEngine: evaluates the in-memory alert working set against the current snapshot.

Trigger handling is delete-then-notify. A failed Store deletion emits nothing and keeps the
alert for the next tick, so a notification is delivered at most once per alert.
"""

import logging
from datetime import datetime
from typing import Callable

from pairwatch.alerts.events import AlertEventBus
from pairwatch.db.store import Store
from pairwatch.domain.clock import local_now
from pairwatch.domain.models import AlertTriggered, PriceAlert, Snapshot
from pairwatch.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class AlertEngine:
    def __init__(
        self,
        store: Store,
        snapshot_provider: Callable[[], Snapshot],
        bus: AlertEventBus,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._store = store
        self._snapshot_provider = snapshot_provider
        self._bus = bus
        self._clock = clock
        self._alerts: list[PriceAlert] = []

    @property
    def alerts(self) -> list[PriceAlert]:
        return list(self._alerts)

    async def load(self) -> int:
        """Replace the working set with the enabled alerts from the Store."""
        self._alerts = await self._store.list_alerts(enabled_only=True)
        logger.info("Loaded %d enabled alert(s)", len(self._alerts))
        return len(self._alerts)

    def track(self, alert: PriceAlert) -> None:
        if alert.enabled and not any(a.identity == alert.identity for a in self._alerts):
            self._alerts.append(alert)

    def untrack(self, alert: PriceAlert) -> None:
        self._alerts = [a for a in self._alerts if a.identity != alert.identity]

    def clear(self) -> None:
        self._alerts = []

    async def evaluate(self) -> list[AlertTriggered]:
        """One evaluation tick. Returns the events emitted during it."""
        if not self._alerts:
            return []
        snapshot = self._snapshot_provider()
        if snapshot.is_empty:
            return []

        fired: list[AlertTriggered] = []
        for alert in list(self._alerts):
            if not alert.enabled:
                continue
            pair = snapshot.find(alert.symbol)
            if pair is None or not alert.is_triggered_by(pair.price_usd):
                continue

            try:
                await self._store.delete_alert(alert)
            except PersistenceError:
                logger.exception("Could not delete triggered alert for %s, will retry next tick", alert.symbol)
                continue

            event = AlertTriggered(
                symbol=alert.symbol,
                target_price=alert.target_price,
                direction=alert.direction,
                price_usd=pair.price_usd,
                triggered_at=self._clock(),
                message=alert.message,
            )
            self._bus.publish(event)
            self.untrack(alert)
            fired.append(event)
            logger.info("Alert triggered: %s", event.describe())
        return fired
