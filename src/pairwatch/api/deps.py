from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from pairwatch.alerts.events import AlertEventBus
from pairwatch.container import Container
from pairwatch.infra.exchange.prober import ValidityProber
from pairwatch.services.refresh import RefreshService
from pairwatch.services.snapshot import SnapshotHolder
from pairwatch.services.sources import SourceCatalog
from pairwatch.services.watchlist import Watchlist


@inject
def get_watchlist(watchlist: Watchlist = Depends(Provide[Container.watchlist])) -> Watchlist:
    return watchlist


@inject
def get_refresh_service(service: RefreshService = Depends(Provide[Container.refresh_service])) -> RefreshService:
    return service


@inject
def get_holder(holder: SnapshotHolder = Depends(Provide[Container.holder])) -> SnapshotHolder:
    return holder


@inject
def get_catalog(catalog: SourceCatalog = Depends(Provide[Container.catalog])) -> SourceCatalog:
    return catalog


@inject
def get_prober(prober: ValidityProber = Depends(Provide[Container.prober])) -> ValidityProber:
    return prober


@inject
def get_bus(bus: AlertEventBus = Depends(Provide[Container.bus])) -> AlertEventBus:
    return bus
