"""Threshold-crossing projection under the compound attrition model."""

import math
from typing import Optional

from engine.normalizer import to_number


def days_to_reach_fraction(daily_pct: float, target_fraction: float) -> Optional[int]:
    """Whole days until remaining falls to `target_fraction` of the start.

    Solves target = (1 - p) ** d for d and rounds up. Returns None when the
    threshold is never crossed (no attrition, or a target of 100% or more).
    """
    p = to_number(daily_pct) / 100
    target = to_number(target_fraction)

    if target <= 0:
        return 0
    if target >= 1:
        return None
    if p <= 0:
        return None
    if p >= 1:
        return 0

    d = math.log(target) / math.log(1 - p)
    if not math.isfinite(d) or d < 0:
        return None
    return math.ceil(d)
