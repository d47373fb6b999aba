"""Catch-all for object payloads. Never fails: degrades to no pairs plus placeholder metadata."""

from typing import Any

from pairwatch.domain.enums import PayloadShape
from pairwatch.parser.base import BasePayloadParser
from pairwatch.parser.classifier import INFO_KEY, PAIRS_KEY
from pairwatch.parser.utils.context import ParseContext
from pairwatch.parser.utils.fields import extract_pairs, read_exchange_info_lenient
from pairwatch.parser.utils.types import ParseResult


class AlternativeParser(BasePayloadParser):
    PARSER_NAME = "AlternativeParser"
    SHAPE = PayloadShape.ALTERNATIVE

    def can_parse(self, root: Any) -> bool:
        return isinstance(root, dict)

    def parse(self, root: Any, context: ParseContext) -> ParseResult:
        raw_pairs = root.get(PAIRS_KEY)
        if isinstance(raw_pairs, list):
            pairs, skipped = extract_pairs(raw_pairs, context)
        else:
            pairs, skipped = [], 0
        exchange_info = read_exchange_info_lenient(root.get(INFO_KEY))
        return self._make_result(pairs, exchange_info, skipped)
