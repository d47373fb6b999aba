"""Timestamp repair for freshly decoded pairs."""

import logging
from datetime import datetime, tzinfo
from typing import Optional

from pairwatch.domain.clock import UnixClock
from pairwatch.domain.models import TradingPair

logger = logging.getLogger(__name__)

FRESHNESS_WINDOW = 3600  # seconds
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
FALLBACK_SUFFIX = " (Current)"


def format_timestamp(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """Render unix seconds for display. tz=None means the local timezone."""
    return datetime.fromtimestamp(timestamp, tz).strftime(DISPLAY_FORMAT)


def is_stale(timestamp: int, now: int, freshness_window: int = FRESHNESS_WINDOW) -> bool:
    return timestamp <= 0 or now - timestamp > freshness_window


def normalize_pair_time(
    pair: TradingPair,
    now_fn: UnixClock,
    freshness_window: int = FRESHNESS_WINDOW,
    tz: Optional[tzinfo] = None,
) -> TradingPair:
    """Return a copy of pair whose time is either a fresh upstream value or now_fn().

    Missing, non-positive or stale times are replaced by now and the display string is
    suffixed with " (Current)". A timestamp that cannot be rendered takes the same path.
    """
    now = now_fn()
    if pair.time is not None and not is_stale(pair.time, now, freshness_window):
        try:
            formatted = format_timestamp(pair.time, tz)
        except (OverflowError, OSError, ValueError):
            logger.debug("Unrenderable timestamp %s for %s, using current time", pair.time, pair.symbol)
        else:
            return pair.model_copy(update={"formatted_time": formatted, "time_is_fallback": False})

    return pair.model_copy(
        update={
            "time": now,
            "formatted_time": format_timestamp(now, tz) + FALLBACK_SUFFIX,
            "time_is_fallback": True,
        }
    )
