"""Classify a raw exchange-detail payload into one of the known shapes."""

import json
from decimal import Decimal
from typing import Any

from pairwatch.domain.enums import PayloadShape
from pairwatch.exceptions import EmptyPayload, UnsupportedFormat

BLANK_BODIES = frozenset({"", "{}", "[]"})

PAIRS_KEY = "pairs"
INFO_KEY = "0"


def decode_body(body: bytes | str) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8-sig", errors="replace")
    return body


def is_blank(text: str) -> bool:
    """Whitespace-only, "{}" or "[]" (after trimming)."""
    return text.strip() in BLANK_BODIES


def load_payload(body: bytes | str) -> Any:
    """Parse body as JSON, keeping numbers exact. Raises EmptyPayload or UnsupportedFormat."""
    text = decode_body(body)
    if is_blank(text):
        raise EmptyPayload()
    try:
        return json.loads(text, parse_float=Decimal, parse_int=Decimal)
    except (ValueError, RecursionError) as exc:
        raise UnsupportedFormat(f"Exchange returned malformed JSON: {exc}") from exc


def classify(root: Any) -> PayloadShape:
    """Pure function from decoded structure to shape tag. First match wins."""
    if root == {} or root == []:
        return PayloadShape.EMPTY
    if isinstance(root, list):
        return PayloadShape.ARRAY
    if isinstance(root, dict):
        if PAIRS_KEY in root and INFO_KEY in root:
            return PayloadShape.STRICT
        return PayloadShape.ALTERNATIVE
    return PayloadShape.UNRECOGNIZED
