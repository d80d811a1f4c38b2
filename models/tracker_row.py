from dataclasses import dataclass
from typing import List, Optional


@dataclass
class TrackerRow:
    row_id: str
    unit_id: str                  # BN label as entered, e.g. "1651"
    equipment_type: str
    on_hand: int
    daily_attrition_pct: float    # e.g. 2.5 for 2.5% per day
    destroyed_by_day: Optional[List[int]] = None  # D1..D5 manual destroyed
    destroyed_manual: Optional[int] = None        # Legacy single-field value
