from pairwatch.db.models.favorite import (
    ENRICHED_FAVORITE_COLUMNS,
    FAVORITES_TABLE,
    EnrichedColumn,
    FavoriteRecord,
    basic_favorites,
    basic_metadata,
)
from pairwatch.db.models.historical_price import HistoricalPriceRecord
from pairwatch.db.models.price_alert import PriceAlertRecord
from pairwatch.db.models.setting import SettingRecord

__all__ = [
    "ENRICHED_FAVORITE_COLUMNS",
    "EnrichedColumn",
    "FAVORITES_TABLE",
    "FavoriteRecord",
    "HistoricalPriceRecord",
    "PriceAlertRecord",
    "SettingRecord",
    "basic_favorites",
    "basic_metadata",
]
