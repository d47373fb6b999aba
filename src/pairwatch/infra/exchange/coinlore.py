"""Exchange listing API client: URL templates plus the exchange directory."""

import json
import logging
from urllib.parse import quote

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from pairwatch.domain.models import ExchangeListing
from pairwatch.exceptions import ExternalServiceError
from pairwatch.infra.http.fetcher import FetchResult, Fetcher
from pairwatch.parser.classifier import decode_body

logger = logging.getLogger(__name__)

BASE_URL = "https://api.coinlore.net/api"

EXCHANGES_PATH = "/exchanges/"
EXCHANGE_PATH = "/exchange/?id={source_id}"


class CoinloreClient:
    def __init__(self, fetcher: Fetcher, base_url: str = BASE_URL) -> None:
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")

    def exchanges_url(self) -> str:
        return self._base_url + EXCHANGES_PATH

    def exchange_url(self, source_id: str) -> str:
        return self._base_url + EXCHANGE_PATH.format(source_id=quote(str(source_id), safe=""))

    async def fetch_exchange(self, source_id: str) -> FetchResult:
        """Raw exchange-detail payload for one source; parsing is the caller's job."""
        return await self._fetcher.fetch(self.exchange_url(source_id))

    @retry(
        retry=retry_if_exception_type(ExternalServiceError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    async def list_exchanges(self) -> list[ExchangeListing]:
        """Directory of exchanges as {"<id>": {"name": ...}, ...}. Entries without a name are dropped."""
        url = self.exchanges_url()
        result = await self._fetcher.fetch(url)
        if not result.ok:
            raise ExternalServiceError(f"Exchange directory returned {result.status or result.error}")

        try:
            data = json.loads(decode_body(result.body))
        except (ValueError, RecursionError) as exc:
            raise ExternalServiceError(f"Exchange directory is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            logger.warning("Exchange directory is %s, expected object", type(data).__name__)
            return []

        listings: list[ExchangeListing] = []
        for key, entry in data.items():
            if not isinstance(entry, dict):
                continue
            name = entry.get("name")
            if not isinstance(name, str) or not name.strip():
                continue
            listings.append(ExchangeListing(id=str(entry.get("id") or key), name=name.strip()))
        return listings
