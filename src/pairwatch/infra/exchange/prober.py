"""Cheap usability check for an exchange source.

The heuristic accepts exactly the layouts the payload parsers ingest and reuses their
element decoder, so a source judged valid always yields at least one pair.
"""

import asyncio
import json
import logging
from decimal import Decimal
from typing import Any

from pairwatch.infra.exchange.coinlore import CoinloreClient
from pairwatch.parser.classifier import PAIRS_KEY, decode_body, is_blank
from pairwatch.parser.utils.fields import is_decodable

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 5.0
MIN_ARRAY_LENGTH = 3  # arrays must be strictly longer than this
SAMPLE_SIZE = 3
BASE_KEYS = ("base", "symbol")
QUOTE_KEYS = ("quote", "price", "price_usd")


def _looks_like_pair(element: Any) -> bool:
    return (
        isinstance(element, dict)
        and any(key in element for key in BASE_KEYS)
        and any(key in element for key in QUOTE_KEYS)
        and is_decodable(element)
    )


def judge_payload(body: bytes | str) -> bool:
    """Pure heuristic over a probe response body."""
    text = decode_body(body)
    if is_blank(text):
        return False
    try:
        root = json.loads(text, parse_float=Decimal, parse_int=Decimal)
    except (ValueError, RecursionError):
        return False

    if isinstance(root, dict):
        pairs = root.get(PAIRS_KEY)
        return isinstance(pairs, list) and any(is_decodable(element) for element in pairs)

    if isinstance(root, list) and len(root) > MIN_ARRAY_LENGTH:
        return any(_looks_like_pair(element) for element in root[:SAMPLE_SIZE])

    return False


class ValidityProber:
    """probe(source_id) -> bool, bounded by its own short timeout."""

    def __init__(self, client: CoinloreClient, timeout: float = PROBE_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    async def probe(self, source_id: str) -> bool:
        try:
            result = await asyncio.wait_for(self._client.fetch_exchange(source_id), self._timeout)
        except asyncio.TimeoutError:
            logger.debug("Probe of source %s timed out after %.1fs", source_id, self._timeout)
            return False
        except Exception:
            logger.exception("Probe of source %s failed", source_id)
            return False

        if not result.ok:
            return False
        return judge_payload(result.body)
