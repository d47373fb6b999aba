from enum import Enum


class PayloadShape(str, Enum):
    """Classification of a raw exchange-detail payload."""

    EMPTY = "EMPTY"
    ARRAY = "ARRAY"  # top-level list of pair objects
    STRICT = "STRICT"  # object with both "pairs" and "0"
    ALTERNATIVE = "ALTERNATIVE"  # any other object, parsed field-by-field
    UNRECOGNIZED = "UNRECOGNIZED"
