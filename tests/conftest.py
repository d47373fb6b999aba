from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pairwatch.db.session import build_engine, sqlite_url
from pairwatch.db.store import Store
from pairwatch.domain.models import ExchangeInfo, Snapshot, TradingPair
from pairwatch.parser.utils.context import ParseContext

NOW = 1_700_000_000


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "pairwatch.db"


@pytest.fixture()
async def engine(db_path):
    eng = build_engine(sqlite_url(db_path))
    yield eng
    await eng.dispose()


@pytest.fixture()
async def store(engine) -> Store:
    s = Store(engine)
    await s.initialize()
    return s


@pytest.fixture()
def context() -> ParseContext:
    return ParseContext(now_fn=lambda: NOW, tz=timezone.utc)


def make_pair(base: str = "BTC", quote: str = "USD", price_usd: str = "100.00", time: int | None = NOW) -> TradingPair:
    return TradingPair(
        base=base,
        quote=quote,
        price=Decimal(price_usd),
        price_usd=Decimal(price_usd),
        volume=Decimal("1"),
        time=time,
    )


def make_snapshot(*pairs: TradingPair, source_id: str = "2", name: str = "Binance") -> Snapshot:
    return Snapshot(
        source_id=source_id,
        pairs=tuple(pairs),
        exchange_info=ExchangeInfo(name=name, date_live="2017-07-14", url="https://www.binance.com"),
        fetched_at=datetime(2024, 1, 1, 12, 0, 0),
    )
