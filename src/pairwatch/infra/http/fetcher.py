"""Fetch-by-URL capability: the only way the core talks to the network."""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    status: Optional[int]
    body: bytes
    error: Optional[str] = None


class Fetcher(Protocol):
    async def fetch(self, url: str) -> FetchResult:
        """GET url. Never raises for transport problems; they are reported in the result."""
        ...


class HttpxFetcher:
    """Async HTTP GET with a fixed timeout."""

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, url: str) -> FetchResult:
        try:
            response = await self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("GET %s failed: %s", url, exc)
            return FetchResult(ok=False, status=None, body=b"", error=str(exc) or type(exc).__name__)

        if not response.is_success:
            logger.warning("GET %s returned %d", url, response.status_code)
            return FetchResult(ok=False, status=response.status_code, body=response.content, error=response.reason_phrase)
        return FetchResult(ok=True, status=response.status_code, body=response.content)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxFetcher":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
