from enum import Enum


class StoreMode(str, Enum):
    """Favorites schema generation the Store is operating against."""

    ENRICHED = "ENRICHED"  # symbol + base/quote/lastPrice/lastExchange/createdAt
    DEGRADED = "DEGRADED"  # symbol-only reads and writes
