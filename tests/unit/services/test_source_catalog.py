from unittest.mock import AsyncMock, MagicMock

from pairwatch.domain.models import ExchangeListing
from pairwatch.services.sources import DEFAULT_SOURCES, ProbeProgress, SourceCatalog


def _catalog(valid_ids: set[str], sources=DEFAULT_SOURCES) -> tuple[SourceCatalog, MagicMock]:
    prober = MagicMock()
    prober.probe = AsyncMock(side_effect=lambda source_id: source_id in valid_ids)
    return SourceCatalog(MagicMock(), prober, sources), prober


class TestListValidSources:
    async def test_incremental_progress(self):
        catalog, _ = _catalog({"1", "3"})
        candidates = [ExchangeListing(id=str(i), name=f"Ex{i}") for i in (1, 2, 3)]

        progress = [p async for p in catalog.list_valid_sources(candidates)]

        assert [(p.source_id, p.valid) for p in progress] == [("1", True), ("2", False), ("3", True)]
        assert [(p.checked, p.valid_count) for p in progress] == [(1, 1), (2, 1), (3, 2)]
        assert all(p.total == 3 for p in progress)
        assert progress[-1].describe() == "2 valid out of 3 checked"

    async def test_skips_blank_known_and_duplicate_names(self):
        catalog, prober = _catalog({"1", "2", "3", "4"})
        candidates = [
            ExchangeListing(id="1", name="Binance"),
            ExchangeListing(id="2", name=" "),
            ExchangeListing(id="3", name="kraken"),
            ExchangeListing(id="4", name="Binance"),
        ]
        progress = [p async for p in catalog.list_valid_sources(candidates, known_names=["Kraken"])]
        assert [p.source_id for p in progress] == ["1"]
        assert prober.probe.await_count == 1

    async def test_empty_candidates(self):
        catalog, _ = _catalog(set())
        assert [p async for p in catalog.list_valid_sources([])] == []


class TestFindDefaultSource:
    async def test_first_valid_in_order(self):
        catalog, prober = _catalog({"29", "311"})
        source = await catalog.find_default_source()
        assert source == ExchangeListing(id="29", name="Kraken")
        assert [c.args[0] for c in prober.probe.await_args_list] == ["2", "37", "29"]

    async def test_none_reachable(self):
        catalog, _ = _catalog(set())
        assert await catalog.find_default_source() is None

    def test_default_list(self):
        assert [s.id for s in DEFAULT_SOURCES] == ["2", "37", "29", "102", "311"]


class TestListExchanges:
    async def test_delegates_to_client(self):
        client = MagicMock()
        client.list_exchanges = AsyncMock(return_value=[ExchangeListing(id="5", name="Bitstamp")])
        catalog = SourceCatalog(client, MagicMock())
        assert (await catalog.list_exchanges())[0].name == "Bitstamp"


def test_probe_progress_serializes():
    progress = ProbeProgress(source_id="2", name="Binance", valid=True, checked=1, valid_count=1, total=5)
    assert '"valid":true' in progress.model_dump_json()
