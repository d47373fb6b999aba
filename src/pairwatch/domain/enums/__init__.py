from pairwatch.domain.enums.alert import AlertDirection
from pairwatch.domain.enums.payload import PayloadShape
from pairwatch.domain.enums.store_mode import StoreMode

__all__ = [
    "AlertDirection",
    "PayloadShape",
    "StoreMode",
]
