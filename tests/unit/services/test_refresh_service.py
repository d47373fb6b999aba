import asyncio
import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import NOW
from pairwatch.exceptions import EmptyPayload, PersistenceError, TransportError, UnsupportedFormat
from pairwatch.infra.http.fetcher import FetchResult
from pairwatch.parser.registry import build_default_registry
from pairwatch.services.refresh import RefreshService
from pairwatch.services.snapshot import SnapshotHolder

PAYLOAD = {
    "0": {"name": "Binance", "date_live": "2017-07-14", "url": "https://www.binance.com"},
    "pairs": [
        {"base": "BTC", "quote": "USDT", "price": 43000, "price_usd": 43000, "volume": 10, "time": NOW},
        {"base": "ETH", "quote": "USDT", "price": "2300.5", "price_usd": "2300.5", "volume": 20, "time": 0},
    ],
}


def _ok(obj) -> FetchResult:
    return FetchResult(ok=True, status=200, body=json.dumps(obj).encode())


def _client(*results: FetchResult) -> MagicMock:
    client = MagicMock()
    client.fetch_exchange = AsyncMock(side_effect=list(results))
    client.exchange_url = MagicMock(side_effect=lambda source_id: f"https://api.test/exchange/?id={source_id}")
    return client


def _service(client, holder=None, **kwargs) -> RefreshService:
    return RefreshService(client, holder or SnapshotHolder(), build_default_registry(), **kwargs)


class TestRefresh:
    async def test_publishes_snapshot(self, context):
        holder = SnapshotHolder()
        service = _service(_client(_ok(PAYLOAD)), holder, context=context)

        snapshot = await service.refresh("2")

        assert holder.current is snapshot
        assert snapshot.source_id == "2"
        assert snapshot.exchange_info.name == "Binance"
        assert [p.symbol for p in snapshot.pairs] == ["BTC/USDT", "ETH/USDT"]
        assert snapshot.find("ETH/USDT").price_usd == Decimal("2300.5")
        assert snapshot.find("ETH/USDT").time_is_fallback is True
        assert service.selected_source == "2"

    async def test_transport_error(self, context):
        holder = SnapshotHolder()
        service = _service(_client(FetchResult(ok=False, status=500, body=b"")), holder, context=context)
        with pytest.raises(TransportError) as exc_info:
            await service.refresh("2")
        assert exc_info.value.status == 500
        assert "id=2" in exc_info.value.url
        assert holder.current.is_empty

    async def test_empty_payload(self, context):
        service = _service(_client(FetchResult(ok=True, status=200, body=b"[]")), context=context)
        with pytest.raises(EmptyPayload):
            await service.refresh("2")

    async def test_unsupported_format_keeps_previous_snapshot(self, context):
        holder = SnapshotHolder()
        service = _service(_client(_ok(PAYLOAD), _ok({"error": "gone"})), holder, context=context)
        first = await service.refresh("2")
        with pytest.raises(UnsupportedFormat):
            await service.refresh("2")
        assert holder.current is first

    async def test_superseded_refresh_is_discarded(self, context):
        release_slow = asyncio.Event()

        async def fetch(source_id):
            if source_id == "slow":
                await release_slow.wait()
            return _ok(PAYLOAD)

        client = MagicMock()
        client.fetch_exchange = fetch
        holder = SnapshotHolder()
        service = _service(client, holder, context=context)

        slow = asyncio.create_task(service.refresh("slow"))
        await asyncio.sleep(0)
        await service.refresh("fast")
        release_slow.set()
        stale = await slow

        assert stale.source_id == "slow"
        assert holder.current.source_id == "fast"

    async def test_refresh_selected(self, context):
        service = _service(_client(_ok(PAYLOAD), _ok(PAYLOAD)), context=context)
        assert await service.refresh_selected() is None
        await service.refresh("29")
        snapshot = await service.refresh_selected()
        assert snapshot.source_id == "29"


class TestHistory:
    async def test_saves_history_when_enabled(self, context):
        store = MagicMock()
        store.save_snapshot_prices = AsyncMock(return_value=2)
        service = _service(_client(_ok(PAYLOAD)), context=context, store=store, save_history=True)
        snapshot = await service.refresh("2")
        store.save_snapshot_prices.assert_awaited_once_with(snapshot)

    async def test_history_off_by_default(self, context):
        store = MagicMock()
        store.save_snapshot_prices = AsyncMock()
        service = _service(_client(_ok(PAYLOAD)), context=context, store=store)
        await service.refresh("2")
        store.save_snapshot_prices.assert_not_awaited()

    async def test_history_failure_does_not_fail_refresh(self, context):
        store = MagicMock()
        store.save_snapshot_prices = AsyncMock(side_effect=PersistenceError("disk full"))
        holder = SnapshotHolder()
        service = _service(_client(_ok(PAYLOAD)), holder, context=context, store=store, save_history=True)
        snapshot = await service.refresh("2")
        assert holder.current is snapshot
