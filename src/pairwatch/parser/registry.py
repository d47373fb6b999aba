"""PayloadParserRegistry: shape -> ordered parser chain, and the parse entry point."""

import logging
from typing import Any

from pairwatch.domain.enums import PayloadShape
from pairwatch.exceptions import EmptyPayload, UnsupportedFormat
from pairwatch.parser.base import BasePayloadParser
from pairwatch.parser.classifier import classify, load_payload
from pairwatch.parser.formats import AlternativeParser, ArrayFormatParser, StrictParser
from pairwatch.parser.utils.context import ParseContext
from pairwatch.parser.utils.types import ParseResult

logger = logging.getLogger(__name__)


class PayloadParserRegistry:
    """Registry mapping PayloadShape -> parsers to try in order.

    A parser that raises hands the payload to the next one in its chain.
    """

    def __init__(self) -> None:
        self._chains: dict[PayloadShape, list[BasePayloadParser]] = {}

    def register(self, shape: PayloadShape, parsers: list[BasePayloadParser]) -> None:
        self._chains[shape] = list(parsers)

    def get(self, shape: PayloadShape) -> list[BasePayloadParser]:
        return list(self._chains.get(shape, []))

    def parse(self, body: bytes | str, context: ParseContext) -> ParseResult:
        """Classify body and run its parser chain.

        Raises EmptyPayload or UnsupportedFormat; every other malformed-field condition is
        absorbed by the parsers (element skipped or field defaulted).
        """
        root = load_payload(body)
        shape = classify(root)
        if shape == PayloadShape.EMPTY:
            raise EmptyPayload()
        return self.parse_root(root, shape, context)

    def parse_root(self, root: Any, shape: PayloadShape, context: ParseContext) -> ParseResult:
        for parser in self.get(shape):
            if not parser.can_parse(root):
                continue
            try:
                result = parser.parse(root, context)
            except (ValueError, TypeError) as exc:
                logger.info("%s rejected payload (%s), trying next parser", parser.PARSER_NAME, exc)
                continue

            if result.skipped:
                logger.warning("%s skipped %d undecodable pair(s)", parser.PARSER_NAME, result.skipped)
            if result.shape == PayloadShape.ALTERNATIVE and not result.pairs:
                raise UnsupportedFormat("Could not load any trading pairs from this exchange")
            return result

        raise UnsupportedFormat()


def build_default_registry() -> PayloadParserRegistry:
    """Create a PayloadParserRegistry with the three known layouts registered."""
    alternative = AlternativeParser()

    registry = PayloadParserRegistry()
    registry.register(PayloadShape.ARRAY, [ArrayFormatParser()])
    registry.register(PayloadShape.STRICT, [StrictParser(), alternative])
    registry.register(PayloadShape.ALTERNATIVE, [alternative])
    return registry
