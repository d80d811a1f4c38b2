from dataclasses import dataclass, field
from typing import List, Optional

from models.computed_row import ComputedRow


@dataclass
class UnitSummary:
    unit_id: str
    on_hand: int
    remaining: int
    destroyed: int
    combat_power_pct: float
    weighted_attrition_pct: float
    days_to_threshold: Optional[int]


@dataclass
class GroupSummary:
    group_name: str
    on_hand: int
    remaining: int
    destroyed: int
    combat_power_pct: float
    weighted_attrition_pct: float
    days_to_threshold: Optional[int]
    row_count: int = 0


@dataclass
class TrackerResult:
    day: int
    computed_rows: List[ComputedRow] = field(default_factory=list)
    unit_summaries: List[UnitSummary] = field(default_factory=list)
    group_summaries: List[GroupSummary] = field(default_factory=list)
    force_total: Optional[GroupSummary] = None
