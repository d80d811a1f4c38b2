from dataclasses import dataclass, field
from typing import List

from models.tracker_row import TrackerRow


@dataclass
class TrackerState:
    day: int = 1
    use_attrition: bool = True
    manual_wins: bool = True
    rows: List[TrackerRow] = field(default_factory=list)
