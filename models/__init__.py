from models.tracker_row import TrackerRow
from models.computed_row import ComputedRow
from models.summary import UnitSummary, GroupSummary, TrackerResult
from models.tracker_state import TrackerState
