"""Base parser interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pairwatch.domain.enums import PayloadShape
from pairwatch.domain.models import ExchangeInfo, TradingPair
from pairwatch.parser.utils.context import ParseContext
from pairwatch.parser.utils.types import ParseResult


class StrictFormatError(ValueError):
    """Payload does not match the strict object layout; hand it to the alternative parser."""


class BasePayloadParser(ABC):
    """Minimal interface all payload parsers must implement."""

    PARSER_NAME: str = "BasePayloadParser"
    SHAPE: PayloadShape = PayloadShape.UNRECOGNIZED

    @abstractmethod
    def can_parse(self, root: Any) -> bool:
        """Quick structural check: should this parser handle this payload?"""

    @abstractmethod
    def parse(self, root: Any, context: ParseContext) -> ParseResult:
        """Extract normalized pairs and exchange metadata."""

    def _make_result(
        self,
        pairs: list[TradingPair],
        exchange_info: Optional[ExchangeInfo] = None,
        skipped: int = 0,
    ) -> ParseResult:
        return ParseResult(
            shape=self.SHAPE,
            parser_name=self.PARSER_NAME,
            pairs=pairs,
            exchange_info=exchange_info,
            skipped=skipped,
        )
