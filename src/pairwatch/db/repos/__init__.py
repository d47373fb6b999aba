from pairwatch.db.repos.alert_repo import AlertRepo
from pairwatch.db.repos.favorite_repo import FavoriteRepo
from pairwatch.db.repos.price_history_repo import PriceHistoryRepo
from pairwatch.db.repos.setting_repo import SettingRepo

__all__ = ["AlertRepo", "FavoriteRepo", "PriceHistoryRepo", "SettingRepo"]
