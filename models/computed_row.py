from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ComputedRow:
    """A tracker row after normalization and loss reconciliation for one day."""
    row_id: str
    unit_id: str
    equipment_type: str
    on_hand: int
    daily_attrition_pct: float
    destroyed_by_day: List[int]
    destroyed_attrition: int        # Model-estimated destroyed through selected day
    destroyed: int                  # Final destroyed after reconciliation
    remaining: int
    combat_power_pct: float         # 0-100
    days_to_threshold: Optional[int]  # None = threshold never reached
    destroyed_manual_active: int    # Manual destroyed applied through selected day
    destroyed_manual_total: int     # Manual destroyed across D1..D5
    explanation_steps: List[str] = field(default_factory=list)

    @property
    def destroyed_pct(self) -> float:
        if self.on_hand <= 0:
            return 0.0
        return self.destroyed / self.on_hand * 100
