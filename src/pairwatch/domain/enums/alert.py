from enum import Enum


class AlertDirection(str, Enum):
    """Which side of the target price fires the alert."""

    ABOVE = "ABOVE"
    BELOW = "BELOW"
