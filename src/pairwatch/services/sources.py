"""Source discovery: the exchange directory and incremental validity probing."""

import logging
from typing import AsyncIterator, Iterable, Optional, Sequence

from pydantic import BaseModel

from pairwatch.domain.models import ExchangeListing
from pairwatch.infra.exchange.coinlore import CoinloreClient
from pairwatch.infra.exchange.prober import ValidityProber

logger = logging.getLogger(__name__)

DEFAULT_SOURCES: tuple[ExchangeListing, ...] = (
    ExchangeListing(id="2", name="Binance"),
    ExchangeListing(id="37", name="Coinbase Pro"),
    ExchangeListing(id="29", name="Kraken"),
    ExchangeListing(id="102", name="Huobi Global"),
    ExchangeListing(id="311", name="KuCoin"),
)


class ProbeProgress(BaseModel):
    """Emitted after each probe so callers can render "N valid out of M checked"."""

    source_id: str
    name: str
    valid: bool
    checked: int
    valid_count: int
    total: int

    def describe(self) -> str:
        return f"{self.valid_count} valid out of {self.checked} checked"


class SourceCatalog:
    def __init__(
        self,
        client: CoinloreClient,
        prober: ValidityProber,
        default_sources: Sequence[ExchangeListing] = DEFAULT_SOURCES,
    ) -> None:
        self._client = client
        self._prober = prober
        self._default_sources = tuple(default_sources)

    @property
    def default_sources(self) -> tuple[ExchangeListing, ...]:
        return self._default_sources

    async def list_exchanges(self) -> list[ExchangeListing]:
        return await self._client.list_exchanges()

    async def list_valid_sources(
        self,
        candidates: Iterable[ExchangeListing],
        known_names: Iterable[str] = (),
    ) -> AsyncIterator[ProbeProgress]:
        """Probe candidates one after another, yielding progress after each probe.

        Candidates with a blank name, or whose name is already known, are not probed.
        """
        seen = {name.strip().lower() for name in known_names}
        queue: list[ExchangeListing] = []
        for candidate in candidates:
            key = candidate.name.strip().lower()
            if not key or key in seen:
                continue
            seen.add(key)
            queue.append(candidate)

        valid_count = 0
        for checked, candidate in enumerate(queue, start=1):
            valid = await self._prober.probe(candidate.id)
            if valid:
                valid_count += 1
            yield ProbeProgress(
                source_id=candidate.id,
                name=candidate.name,
                valid=valid,
                checked=checked,
                valid_count=valid_count,
                total=len(queue),
            )
        logger.info("Probed %d source(s), %d valid", len(queue), valid_count)

    async def find_default_source(self) -> Optional[ExchangeListing]:
        """First well-known exchange that currently probes valid."""
        for source in self._default_sources:
            if await self._prober.probe(source.id):
                return source
            logger.info("Default source %s (%s) is not usable", source.name, source.id)
        return None
