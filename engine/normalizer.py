"""Total normalization of identifiers, counts, rates, and daily-loss arrays.

Every function here accepts arbitrary input (None, strings, NaN, wrong-length
sequences) and returns a valid value. Nothing raises.
"""

import math
import re
from typing import Dict, List, Optional

from config.defaults import (
    DAYS_IN_WINDOW, MIN_DAY, MAX_DAY,
    MIN_ATTRITION_PCT, MAX_ATTRITION_PCT,
)

_WHITESPACE = re.compile(r"\s+")


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def to_number(value) -> float:
    """Convert to a finite float; anything else becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return n if math.isfinite(n) else 0.0


def to_count(value) -> int:
    """Convert to a non-negative integer count (floored)."""
    return max(0, math.floor(to_number(value)))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp_day(value) -> int:
    """Floor the selected day and clamp it to the observation window."""
    return int(clamp(math.floor(to_number(value)), MIN_DAY, MAX_DAY))


def clamp_rate(value) -> float:
    """Clamp a daily attrition percentage to [0, 100]."""
    return clamp(to_number(value), MIN_ATTRITION_PCT, MAX_ATTRITION_PCT)


def normalize_destroyed_by_day(values) -> List[int]:
    """Return exactly DAYS_IN_WINDOW non-negative integer daily losses."""
    base = list(values) if isinstance(values, (list, tuple)) else []
    return [to_count(base[i]) if i < len(base) else 0 for i in range(DAYS_IN_WINDOW)]


def cumulative_destroyed(destroyed_by_day, day) -> int:
    """Sum of manual daily losses from D1 through the (clamped) selected day."""
    return sum(normalize_destroyed_by_day(destroyed_by_day)[:clamp_day(day)])


def _collapse(value) -> str:
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value).strip()).upper()


def canonical_unit_id(value, aliases: Optional[Dict[str, str]] = None) -> str:
    """Canonical unit identifier: trimmed, single-spaced, upper case, alias-folded."""
    key = _collapse(value)
    if not aliases:
        return key
    folded = {_collapse(k): _collapse(v) for k, v in aliases.items()}
    return folded.get(key, key)
