"""Injectable clocks. The core never reads the wall clock directly."""

import time
from datetime import datetime
from typing import Callable

UnixClock = Callable[[], int]


def unix_now() -> int:
    return int(time.time())


def local_now() -> datetime:
    """Naive local time, matching how alert and favorite timestamps are stored."""
    return datetime.now()
