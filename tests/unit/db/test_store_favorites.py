from datetime import datetime
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from pairwatch.db.schema import SchemaManager
from pairwatch.db.store import Store, is_missing_column
from pairwatch.domain.enums import StoreMode
from pairwatch.exceptions import PersistenceError


class TestFavorites:
    async def test_add_and_list_enriched(self, store):
        await store.add_favorite("BTC/USD", base="BTC", quote="USD", last_price=Decimal("43000.5"), last_exchange="Binance")
        [fav] = await store.list_favorites()
        assert fav.symbol == "BTC/USD"
        assert fav.last_price == Decimal("43000.5")
        assert fav.last_exchange == "Binance"
        assert fav.created_at is not None

    async def test_add_is_upsert(self, store):
        await store.add_favorite("BTC/USD", last_price=Decimal("1"))
        await store.add_favorite("BTC/USD", last_price=Decimal("2"))
        assert await store.count_favorites() == 1
        assert (await store.list_favorites())[0].last_price == Decimal("2")

    async def test_missing_sides_reconstructed(self, store):
        await store.add_favorite("ADA/EUR")
        [fav] = await store.list_favorites()
        assert (fav.base, fav.quote) == ("ADA", "EUR")

    async def test_newest_first(self, engine):
        ticks = iter(range(1, 10))
        store = Store(engine, clock=lambda: datetime(2024, 1, next(ticks)))
        await store.initialize()
        await store.add_favorite("A/USD")
        await store.add_favorite("B/USD")
        assert [f.symbol for f in await store.list_favorites()] == ["B/USD", "A/USD"]

    async def test_remove(self, store):
        await store.add_favorite("BTC/USD")
        assert await store.is_favorite("BTC/USD")
        assert await store.remove_favorite("BTC/USD") == 1
        assert not await store.is_favorite("BTC/USD")
        assert await store.remove_favorite("BTC/USD") == 0

    async def test_symbols(self, store):
        await store.add_favorite("A/USD")
        await store.add_favorite("B/USD")
        assert await store.favorite_symbols() == ["A/USD", "B/USD"]


class TestCleanup:
    async def _seed(self, engine, symbols):
        async with engine.begin() as conn:
            await conn.execute(text('DROP TABLE "Favorites"'))
            await conn.execute(text('CREATE TABLE "Favorites" (id INTEGER PRIMARY KEY AUTOINCREMENT, symbol TEXT)'))
            for symbol in symbols:
                await conn.execute(text('INSERT INTO "Favorites" (symbol) VALUES (:s)'), {"s": symbol})

    async def test_removes_invalid_and_duplicates(self, engine, store):
        await self._seed(engine, ["BTC/USD", "BTC/USD", "", "ETH/", "/USD", None, "SOL/EUR"])
        removed = await store.cleanup_favorites()
        assert removed == 5
        assert await store.favorite_symbols() == ["BTC/USD", "SOL/EUR"]

    async def test_idempotent(self, engine, store):
        await self._seed(engine, ["BTC/USD", "BTC/USD", "ETH/", "SOL/EUR"])
        await store.cleanup_favorites()
        first = await store.count_favorites()
        assert await store.cleanup_favorites() == 0
        assert await store.count_favorites() == first == 2

    async def test_initialize_runs_cleanup(self, engine):
        await self._seed_basic(engine)
        store = Store(engine)
        await store.initialize()
        assert await store.favorite_symbols() == ["BTC/USD"]

    async def _seed_basic(self, engine):
        async with engine.begin() as conn:
            await conn.execute(text('CREATE TABLE "Favorites" (id INTEGER PRIMARY KEY AUTOINCREMENT, symbol TEXT)'))
            for symbol in ["BTC/USD", "BTC/USD", "/EUR"]:
                await conn.execute(text('INSERT INTO "Favorites" (symbol) VALUES (:s)'), {"s": symbol})


async def _degraded_store(engine, monkeypatch) -> Store:
    async def broken(self, column):
        raise OperationalError("ALTER TABLE", {}, Exception("boom"))

    async def broken_recreate(self):
        raise SQLAlchemyError("cannot recreate")

    monkeypatch.setattr(SchemaManager, "ensure_favorite_column", broken)
    monkeypatch.setattr(SchemaManager, "recreate_favorites", broken_recreate)
    store = Store(engine)
    assert await store.initialize() == StoreMode.DEGRADED
    return store


class TestDegradedMode:
    async def test_add_then_list_splits_symbol(self, engine, monkeypatch):
        store = await _degraded_store(engine, monkeypatch)
        await store.add_favorite("ETH/USD", base="ETH", quote="USD", last_price=Decimal("3000"))
        [fav] = await store.list_favorites()
        assert (fav.symbol, fav.base, fav.quote) == ("ETH/USD", "ETH", "USD")
        assert fav.last_price is None

    async def test_duplicate_add_ignored(self, engine, monkeypatch):
        store = await _degraded_store(engine, monkeypatch)
        await store.add_favorite("ETH/USD")
        await store.add_favorite("ETH/USD")
        assert await store.count_favorites() == 1

    async def test_remove_and_cleanup(self, engine, monkeypatch):
        store = await _degraded_store(engine, monkeypatch)
        await store.add_favorite("ETH/USD")
        assert await store.cleanup_favorites() == 0
        assert await store.remove_favorite("ETH/USD") == 1


class TestMissingColumnRetry:
    async def test_enriched_calls_fall_back_when_columns_vanish(self, engine, store):
        async with engine.begin() as conn:
            await conn.execute(text('DROP TABLE "Favorites"'))
            await conn.execute(text('CREATE TABLE "Favorites" (id INTEGER PRIMARY KEY AUTOINCREMENT, symbol TEXT UNIQUE)'))
        assert store.mode == StoreMode.ENRICHED

        await store.add_favorite("XRP/USD", base="XRP", quote="USD")
        [fav] = await store.list_favorites()
        assert (fav.base, fav.quote) == ("XRP", "USD")

    def test_is_missing_column(self):
        exc = PersistenceError("x")
        exc.__cause__ = OperationalError("SELECT", {}, Exception("no such column: Favorites.base"))
        assert is_missing_column(exc)
        assert not is_missing_column(PersistenceError("database is locked"))

    async def test_other_errors_propagate(self, engine, store):
        async with engine.begin() as conn:
            await conn.execute(text('DROP TABLE "Favorites"'))
        try:
            await store.list_favorites()
        except PersistenceError as exc:
            assert "no such table" in str(exc)
        else:
            raise AssertionError("expected PersistenceError")
