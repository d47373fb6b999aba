"""Per-refresh parse context: the clock and freshness policy every parser applies."""

from datetime import tzinfo
from typing import Optional

from pairwatch.domain.clock import UnixClock, unix_now
from pairwatch.domain.models import TradingPair
from pairwatch.parser.utils.time import FRESHNESS_WINDOW, normalize_pair_time


class ParseContext:
    def __init__(
        self,
        now_fn: UnixClock = unix_now,
        freshness_window: int = FRESHNESS_WINDOW,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.now_fn = now_fn
        self.freshness_window = freshness_window
        self.tz = tz

    def normalize(self, pair: TradingPair) -> TradingPair:
        return normalize_pair_time(pair, self.now_fn, self.freshness_window, self.tz)
