"""
Numeric helpers shared by the scorer, aggregator and ranker.
"""

import math
from typing import Any


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Round to two decimals (explainability fields)."""
    return math.floor(value * 100 + 0.5) / 100


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def as_count(value: Any) -> int:
    """
    Normalize an engagement or follower count.

    Missing, negative, non-numeric and non-finite values become 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)
