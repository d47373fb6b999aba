"""Top-level array payloads: a bare list of pair objects, no exchange metadata."""

from typing import Any

from pairwatch.domain.enums import PayloadShape
from pairwatch.parser.base import BasePayloadParser
from pairwatch.parser.utils.context import ParseContext
from pairwatch.parser.utils.fields import extract_pairs
from pairwatch.parser.utils.types import ParseResult


class ArrayFormatParser(BasePayloadParser):
    PARSER_NAME = "ArrayFormatParser"
    SHAPE = PayloadShape.ARRAY

    def can_parse(self, root: Any) -> bool:
        return isinstance(root, list)

    def parse(self, root: Any, context: ParseContext) -> ParseResult:
        pairs, skipped = extract_pairs(root, context)
        return self._make_result(pairs, skipped=skipped)
