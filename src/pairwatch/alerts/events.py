"""In-process fan-out of AlertTriggered events to any number of subscribers."""

import asyncio
import logging
from typing import Optional

from pairwatch.domain.models import AlertTriggered

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5


class Subscription:
    """Async iterator over one subscriber's queue. Ends once its stop_event is set."""

    def __init__(self, bus: "AlertEventBus", stop_event: asyncio.Event, poll_interval: float = POLL_INTERVAL) -> None:
        self._bus = bus
        self._queue: asyncio.Queue[AlertTriggered] = asyncio.Queue()
        self._stop_event = stop_event
        self._poll_interval = poll_interval

    def put(self, event: AlertTriggered) -> None:
        self._queue.put_nowait(event)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> AlertTriggered:
        while not self._stop_event.is_set():
            try:
                return await asyncio.wait_for(self._queue.get(), self._poll_interval)
            except asyncio.TimeoutError:
                continue
        self.close()
        raise StopAsyncIteration

    def close(self) -> None:
        self._bus.unsubscribe(self)


class AlertEventBus:
    def __init__(self) -> None:
        self._subscribers: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, stop_event: Optional[asyncio.Event] = None) -> Subscription:
        """Register immediately; events published from now on are delivered to the returned iterator."""
        subscription = Subscription(self, stop_event or asyncio.Event())
        self._subscribers.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)

    def publish(self, event: AlertTriggered) -> int:
        for subscription in list(self._subscribers):
            subscription.put(event)
        logger.debug("Delivered alert for %s to %d subscriber(s)", event.symbol, len(self._subscribers))
        return len(self._subscribers)
