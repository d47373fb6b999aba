"""Refresh cycle: fetch -> classify/parse -> normalize -> publish snapshot."""

import logging
from datetime import datetime
from typing import Callable, Optional

from pairwatch.db.store import Store
from pairwatch.domain.clock import local_now
from pairwatch.domain.models import Snapshot
from pairwatch.exceptions import PersistenceError, TransportError
from pairwatch.infra.exchange.coinlore import CoinloreClient
from pairwatch.parser.registry import PayloadParserRegistry
from pairwatch.parser.utils.context import ParseContext
from pairwatch.services.snapshot import SnapshotHolder

logger = logging.getLogger(__name__)


class RefreshService:
    def __init__(
        self,
        client: CoinloreClient,
        holder: SnapshotHolder,
        registry: PayloadParserRegistry,
        context: Optional[ParseContext] = None,
        store: Optional[Store] = None,
        save_history: bool = False,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._client = client
        self._holder = holder
        self._registry = registry
        self._context = context or ParseContext()
        self._store = store
        self._save_history = save_history
        self._clock = clock
        self._selected_source: Optional[str] = None

    @property
    def selected_source(self) -> Optional[str]:
        return self._selected_source

    async def refresh(self, source_id: str) -> Snapshot:
        """Fetch and ingest one source.

        Raises TransportError, EmptyPayload or UnsupportedFormat. The current snapshot is
        left untouched on failure. No retry: that is the caller's policy.
        """
        ticket = self._holder.next_ticket()
        self._selected_source = source_id

        result = await self._client.fetch_exchange(source_id)
        if not result.ok:
            raise TransportError(self._client.exchange_url(source_id), result.status, result.error or "")

        parsed = self._registry.parse(result.body, self._context)
        snapshot = Snapshot(
            source_id=source_id,
            pairs=tuple(parsed.pairs),
            exchange_info=parsed.exchange_info,
            fetched_at=self._clock(),
        )
        logger.info(
            "Loaded %d pair(s) from source %s via %s", len(snapshot.pairs), source_id, parsed.parser_name
        )

        if self._holder.publish(snapshot, ticket):
            await self._record_history(snapshot)
        return snapshot

    async def refresh_selected(self) -> Optional[Snapshot]:
        """Tick body for the auto-refresh timer. No-op until a source was selected."""
        if self._selected_source is None:
            return None
        return await self.refresh(self._selected_source)

    async def _record_history(self, snapshot: Snapshot) -> None:
        if not self._save_history or self._store is None or snapshot.is_empty:
            return
        try:
            saved = await self._store.save_snapshot_prices(snapshot)
        except PersistenceError:
            logger.exception("Could not save price history for source %s", snapshot.source_id)
            return
        logger.debug("Saved %d historical price(s)", saved)
