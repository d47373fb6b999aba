"""Object payloads carrying both a "pairs" array and a "0" metadata entry."""

from typing import Any, Optional

from pairwatch.domain.enums import PayloadShape
from pairwatch.domain.models import UNKNOWN, ExchangeInfo
from pairwatch.parser.base import BasePayloadParser, StrictFormatError
from pairwatch.parser.classifier import INFO_KEY, PAIRS_KEY
from pairwatch.parser.utils.context import ParseContext
from pairwatch.parser.utils.fields import extract_pairs
from pairwatch.parser.utils.types import ParseResult

INFO_FIELDS = ("name", "date_live", "url")


def _read_info(value: Any) -> Optional[ExchangeInfo]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise StrictFormatError(f"{INFO_KEY!r} is {type(value).__name__}, expected object")
    fields: dict[str, str] = {}
    for key in INFO_FIELDS:
        raw = value.get(key)
        if raw is not None and not isinstance(raw, str):
            raise StrictFormatError(f"exchange {key!r} is {type(raw).__name__}, expected string")
        fields[key] = raw or UNKNOWN
    return ExchangeInfo(**fields)


class StrictParser(BasePayloadParser):
    """Typed read of the canonical layout. Any structural mismatch raises StrictFormatError."""

    PARSER_NAME = "StrictParser"
    SHAPE = PayloadShape.STRICT

    def can_parse(self, root: Any) -> bool:
        return isinstance(root, dict) and PAIRS_KEY in root and INFO_KEY in root

    def parse(self, root: Any, context: ParseContext) -> ParseResult:
        raw_pairs = root.get(PAIRS_KEY)
        if not isinstance(raw_pairs, list):
            raise StrictFormatError(f"{PAIRS_KEY!r} is {type(raw_pairs).__name__}, expected array")
        for index, element in enumerate(raw_pairs):
            if not isinstance(element, dict):
                raise StrictFormatError(f"pair {index} is {type(element).__name__}, expected object")

        exchange_info = _read_info(root.get(INFO_KEY))
        pairs, skipped = extract_pairs(raw_pairs, context)
        return self._make_result(pairs, exchange_info, skipped)
