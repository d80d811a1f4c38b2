"""Compound daily attrition model and its inverse.

    remaining = start * (1 - p) ** day,   p = daily_pct / 100
"""

import math
from typing import List

from config.defaults import MIN_ATTRITION_PCT, MAX_ATTRITION_PCT
from engine.normalizer import to_number, clamp, clamp_day, cumulative_destroyed


def remaining_after_days(start: float, daily_pct: float, day: float) -> float:
    """Project the remaining count after `day` days of constant attrition."""
    start = to_number(start)
    p = to_number(daily_pct) / 100
    d = max(0, math.floor(to_number(day)))
    if start <= 0:
        return 0.0
    if p <= 0:
        return start
    if p >= 1:
        return 0.0
    return start * (1 - p) ** d


def infer_daily_attrition_pct(on_hand: int, destroyed_by_day: List[int], day: int) -> float:
    """Infer the constant daily attrition % matching cumulative destroyed through `day`."""
    oh = max(0, math.floor(to_number(on_hand)))
    d = clamp_day(day)
    if oh <= 0:
        return 0.0

    cum_destroyed = cumulative_destroyed(destroyed_by_day, d)
    frac = max(0, oh - cum_destroyed) / oh

    if frac <= 0:
        return 100.0
    if frac >= 1:
        return 0.0

    p = 1 - frac ** (1 / d)
    return clamp(p * 100, MIN_ATTRITION_PCT, MAX_ATTRITION_PCT)
