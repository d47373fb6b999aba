"""Core data types for the payload parsers."""

from typing import Optional

from pydantic import BaseModel

from pairwatch.domain.enums import PayloadShape
from pairwatch.domain.models import ExchangeInfo, TradingPair


class ParseResult(BaseModel):
    """Normalized output of one parser. exchange_info is None when the payload carries none."""

    shape: PayloadShape
    parser_name: str
    pairs: list[TradingPair]
    exchange_info: Optional[ExchangeInfo] = None
    skipped: int = 0  # elements dropped because they could not be decoded
