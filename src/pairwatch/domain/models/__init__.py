from pairwatch.domain.models.alert import AlertIdentity, AlertTriggered, PriceAlert
from pairwatch.domain.models.favorite import FavoriteEntry, split_symbol
from pairwatch.domain.models.history import HistoricalPrice
from pairwatch.domain.models.market import UNKNOWN, ExchangeInfo, ExchangeListing, Snapshot, TradingPair

__all__ = [
    "AlertIdentity",
    "AlertTriggered",
    "ExchangeInfo",
    "ExchangeListing",
    "FavoriteEntry",
    "HistoricalPrice",
    "PriceAlert",
    "Snapshot",
    "TradingPair",
    "UNKNOWN",
    "split_symbol",
]
