"""Tolerant field extraction shared by every payload parser and the validity prober.

Upstream sources disagree on types: numbers arrive as JSON numbers or as numeric strings,
and keys come and go. Each reader below prefers the native type, accepts the string form
second and otherwise falls back to a default. Only a structurally wrong element (not an
object, or a non-string base/quote) is undecodable.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from pairwatch.domain.models import UNKNOWN, ExchangeInfo, TradingPair
from pairwatch.parser.utils.context import ParseContext

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
MAX_INT_DIGITS = 18  # largest decimal exponent accepted by read_int


class PairDecodeError(ValueError):
    """A single pair element cannot be decoded. The element is skipped, never the batch."""


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    return result if result.is_finite() else None


def read_decimal(obj: dict, key: str, default: Decimal = ZERO) -> Decimal:
    value = _to_decimal(obj.get(key))
    return default if value is None else value


def read_int(obj: dict, key: str) -> Optional[int]:
    """Integral value for key, or None when absent, fractional, out of range or unparseable."""
    value = _to_decimal(obj.get(key))
    if value is None or value.adjusted() > MAX_INT_DIGITS or value != value.to_integral_value():
        return None
    return int(value)


def read_text(obj: dict, key: str) -> str:
    """String field; absent or null becomes "Unknown", any other JSON type is undecodable."""
    value = obj.get(key)
    if value is None:
        return UNKNOWN
    if not isinstance(value, str):
        raise PairDecodeError(f"{key!r} is {type(value).__name__}, expected string")
    return value


def decode_pair(element: Any) -> TradingPair:
    """Decode one raw pair object. The result still needs time normalization."""
    if not isinstance(element, dict):
        raise PairDecodeError(f"pair element is {type(element).__name__}, expected object")
    return TradingPair(
        base=read_text(element, "base"),
        quote=read_text(element, "quote"),
        price=read_decimal(element, "price"),
        price_usd=read_decimal(element, "price_usd"),
        volume=read_decimal(element, "volume"),
        time=read_int(element, "time"),
    )


def is_decodable(element: Any) -> bool:
    try:
        decode_pair(element)
    except PairDecodeError:
        return False
    return True


def extract_pairs(elements: Iterable[Any], context: ParseContext) -> tuple[list[TradingPair], int]:
    """Decode and normalize every element, skipping the ones that fail. Returns (pairs, skipped)."""
    pairs: list[TradingPair] = []
    skipped = 0
    for index, element in enumerate(elements):
        try:
            pair = decode_pair(element)
        except PairDecodeError as exc:
            skipped += 1
            logger.debug("Skipping pair element %d: %s", index, exc)
            continue
        pairs.append(context.normalize(pair))
    return pairs, skipped


def read_exchange_info_lenient(value: Any) -> ExchangeInfo:
    """Metadata from the "0" entry, each field independently defaulting to "Unknown"."""
    if not isinstance(value, dict):
        return ExchangeInfo()

    def _field(key: str) -> str:
        raw = value.get(key)
        return raw if isinstance(raw, str) else UNKNOWN

    return ExchangeInfo(name=_field("name"), date_live=_field("date_live"), url=_field("url"))
