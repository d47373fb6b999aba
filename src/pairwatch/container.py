from dependency_injector import containers, providers

from pairwatch.alerts.engine import AlertEngine
from pairwatch.alerts.events import AlertEventBus
from pairwatch.config import Settings
from pairwatch.db.session import build_engine, build_session_factory
from pairwatch.db.store import Store
from pairwatch.domain.models import ExchangeListing
from pairwatch.infra.exchange.coinlore import CoinloreClient
from pairwatch.infra.exchange.prober import ValidityProber
from pairwatch.infra.http.fetcher import HttpxFetcher
from pairwatch.parser.registry import build_default_registry
from pairwatch.parser.utils.context import ParseContext
from pairwatch.services.refresh import RefreshService
from pairwatch.services.snapshot import SnapshotHolder
from pairwatch.services.sources import DEFAULT_SOURCES, SourceCatalog
from pairwatch.services.watchlist import Watchlist


def resolve_default_sources(source_ids: list[str]) -> list[ExchangeListing]:
    """Configured ids, named after the well-known exchanges where we know the name."""
    names = {source.id: source.name for source in DEFAULT_SOURCES}
    return [ExchangeListing(id=source_id, name=names.get(source_id, f"Exchange {source_id}")) for source_id in source_ids]


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["pairwatch.api.deps"])

    settings = providers.Singleton(Settings)

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=engine,
    )

    store = providers.Singleton(
        Store,
        engine=engine,
        session_factory=session_factory,
    )

    fetcher = providers.Singleton(HttpxFetcher, timeout=settings.provided.fetch_timeout)
    probe_fetcher = providers.Singleton(HttpxFetcher, timeout=settings.provided.probe_timeout)

    client = providers.Singleton(CoinloreClient, fetcher=fetcher, base_url=settings.provided.api_base_url)
    probe_client = providers.Singleton(CoinloreClient, fetcher=probe_fetcher, base_url=settings.provided.api_base_url)

    prober = providers.Singleton(ValidityProber, client=probe_client, timeout=settings.provided.probe_timeout)

    catalog = providers.Singleton(
        SourceCatalog,
        client=client,
        prober=prober,
        default_sources=providers.Callable(resolve_default_sources, settings.provided.default_sources),
    )

    holder = providers.Singleton(SnapshotHolder)
    registry = providers.Singleton(build_default_registry)
    parse_context = providers.Singleton(ParseContext, freshness_window=settings.provided.freshness_window)

    refresh_service = providers.Singleton(
        RefreshService,
        client=client,
        holder=holder,
        registry=registry,
        context=parse_context,
        store=store,
        save_history=settings.provided.save_history,
    )

    bus = providers.Singleton(AlertEventBus)
    alert_engine = providers.Singleton(AlertEngine, store=store, snapshot_provider=holder, bus=bus)

    watchlist = providers.Singleton(Watchlist, store=store, engine=alert_engine, holder=holder)
