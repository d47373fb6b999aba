from pydantic_settings import BaseSettings, SettingsConfigDict

from pairwatch.db.session import sqlite_url
from pairwatch.infra.exchange.coinlore import BASE_URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAIRWATCH_", env_file=".env", extra="ignore")

    db_path: str = "pairwatch.db"
    api_base_url: str = BASE_URL
    fetch_timeout: float = 30.0
    probe_timeout: float = 5.0
    alert_interval: float = 30.0
    refresh_interval: float = 0.0  # 0 disables auto-refresh; refresh is then user-triggered only
    freshness_window: int = 3600
    default_sources: list[str] = ["2", "37", "29", "102", "311"]
    save_history: bool = False
    debug: bool = False
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        return sqlite_url(self.db_path)


settings = Settings()
