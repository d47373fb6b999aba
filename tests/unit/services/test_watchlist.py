from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import make_pair, make_snapshot
from pairwatch.alerts.engine import AlertEngine
from pairwatch.alerts.events import AlertEventBus
from pairwatch.domain.enums import AlertDirection
from pairwatch.domain.models import FavoriteEntry
from pairwatch.exceptions import DuplicateAlertError, InvalidAlertError
from pairwatch.services.snapshot import SnapshotHolder
from pairwatch.services.watchlist import Watchlist, default_alert_message


@pytest.fixture()
def holder() -> SnapshotHolder:
    return SnapshotHolder()


@pytest.fixture()
def alert_engine(store, holder) -> AlertEngine:
    return AlertEngine(store, holder, AlertEventBus())


@pytest.fixture()
def watchlist(store, alert_engine, holder) -> Watchlist:
    return Watchlist(store, alert_engine, holder)


def _publish(holder: SnapshotHolder, *pairs) -> None:
    holder.publish(make_snapshot(*pairs, name="Kraken"), holder.next_ticket())


class TestFavorites:
    async def test_add_enriches_from_snapshot(self, watchlist, holder, store):
        _publish(holder, make_pair("BTC", "USD", "43000"))
        entry = await watchlist.add_favorite("BTC/USD")
        assert entry.last_price == Decimal("43000")
        assert entry.last_exchange == "Kraken"

        [stored] = await store.list_favorites()
        assert stored.last_exchange == "Kraken"
        assert stored.last_price == Decimal("43000")

    async def test_add_unknown_symbol(self, watchlist, store):
        entry = await watchlist.add_favorite("  DOGE/USD ")
        assert entry.symbol == "DOGE/USD"
        assert await store.favorite_symbols() == ["DOGE/USD"]

    async def test_add_blank_rejected(self, watchlist):
        with pytest.raises(ValueError):
            await watchlist.add_favorite("   ")

    async def test_list_overlays_live_prices(self, watchlist, holder):
        _publish(holder, make_pair("BTC", "USD", "100"))
        await watchlist.add_favorite("BTC/USD")
        await watchlist.add_favorite("ETH/USD")
        _publish(holder, make_pair("BTC", "USD", "150"))

        favorites = {f.symbol: f for f in await watchlist.list_favorites()}
        assert favorites["BTC/USD"].last_price == Decimal("150")
        assert favorites["ETH/USD"].last_price is None

    async def test_list_reads_store_once(self, holder):
        store = MagicMock()
        store.list_favorites = AsyncMock(return_value=[FavoriteEntry(symbol="BTC/USD"), FavoriteEntry(symbol="ETH/USD")])
        store.favorite_symbols = AsyncMock()
        _publish(holder, make_pair("BTC", "USD", "150"), make_pair("SOL", "USD", "20"))
        watchlist = Watchlist(store, MagicMock(), holder)

        favorites = await watchlist.list_favorites()

        assert [f.symbol for f in favorites] == ["BTC/USD", "ETH/USD"]
        assert favorites[0].last_price == Decimal("150")
        store.list_favorites.assert_awaited_once()
        store.favorite_symbols.assert_not_awaited()

    async def test_list_without_snapshot(self, watchlist):
        await watchlist.add_favorite("BTC/USD")
        [fav] = await watchlist.list_favorites()
        assert (fav.base, fav.quote) == ("BTC", "USD")

    async def test_remove(self, watchlist):
        await watchlist.add_favorite("BTC/USD")
        assert await watchlist.remove_favorite("BTC/USD") == 1
        assert await watchlist.list_favorites() == []


class TestAlerts:
    async def test_create_persists_and_tracks(self, watchlist, alert_engine, store):
        alert = await watchlist.create_alert("BTC/USD", Decimal("100"), AlertDirection.ABOVE)
        assert alert.message == "Alert for BTC/USD when price goes above $100.00"
        assert [a.identity for a in alert_engine.alerts] == [alert.identity]
        assert len(await store.list_alerts()) == 1

    async def test_custom_message(self, watchlist):
        alert = await watchlist.create_alert("BTC/USD", Decimal("100"), AlertDirection.BELOW, "buy the dip")
        assert alert.message == "buy the dip"

    @pytest.mark.parametrize("target", [Decimal("0"), Decimal("-1")])
    async def test_rejects_non_positive_target(self, watchlist, target):
        with pytest.raises(InvalidAlertError):
            await watchlist.create_alert("BTC/USD", target, AlertDirection.ABOVE)

    async def test_rejects_duplicate(self, watchlist):
        await watchlist.create_alert("BTC/USD", Decimal("100"), AlertDirection.ABOVE)
        with pytest.raises(DuplicateAlertError):
            await watchlist.create_alert("BTC/USD", Decimal("100.00"), AlertDirection.ABOVE)
        await watchlist.create_alert("BTC/USD", Decimal("100"), AlertDirection.BELOW)

    async def test_would_trigger_immediately(self, watchlist, holder):
        _publish(holder, make_pair("BTC", "USD", "100.00"))
        assert watchlist.would_trigger_immediately("BTC/USD", Decimal("100.00"), AlertDirection.ABOVE)
        assert watchlist.would_trigger_immediately("BTC/USD", Decimal("120"), AlertDirection.BELOW)
        assert not watchlist.would_trigger_immediately("BTC/USD", Decimal("120"), AlertDirection.ABOVE)
        assert not watchlist.would_trigger_immediately("ETH/USD", Decimal("1"), AlertDirection.ABOVE)
        assert not watchlist.would_trigger_immediately("BTC/USD", Decimal("0"), AlertDirection.BELOW)

    async def test_delete(self, watchlist, alert_engine, store):
        alert = await watchlist.create_alert("BTC/USD", Decimal("100"), AlertDirection.ABOVE)
        assert await watchlist.delete_alert(alert) == 1
        assert alert_engine.alerts == []
        assert await store.list_alerts(enabled_only=False) == []

    async def test_disable_and_enable(self, watchlist, alert_engine):
        alert = await watchlist.create_alert("BTC/USD", Decimal("100"), AlertDirection.ABOVE)
        await watchlist.set_alert_enabled(alert, False)
        assert alert_engine.alerts == []
        [stored] = await watchlist.list_alerts()
        assert stored.enabled is False

        await watchlist.set_alert_enabled(stored, True)
        assert len(alert_engine.alerts) == 1

    async def test_clear(self, watchlist, alert_engine):
        await watchlist.create_alert("BTC/USD", Decimal("100"), AlertDirection.ABOVE)
        await watchlist.create_alert("ETH/USD", Decimal("100"), AlertDirection.ABOVE)
        assert await watchlist.clear_alerts() == 2
        assert alert_engine.alerts == []

    async def test_created_alert_fires_on_next_tick(self, watchlist, alert_engine, holder):
        _publish(holder, make_pair("BTC", "USD", "100.00"))
        await watchlist.create_alert("BTC/USD", Decimal("100.00"), AlertDirection.ABOVE)
        [event] = await alert_engine.evaluate()
        assert event.symbol == "BTC/USD"
        assert await watchlist.list_alerts() == []


class TestSettings:
    async def test_round_trip(self, watchlist):
        await watchlist.set_setting("selected_source", "2")
        assert await watchlist.get_setting("selected_source") == "2"
        assert await watchlist.delete_setting("selected_source")


def test_default_message_groups_thousands():
    assert default_alert_message("BTC/USD", Decimal("43210.5"), AlertDirection.BELOW) == (
        "Alert for BTC/USD when price goes below $43,210.50"
    )
