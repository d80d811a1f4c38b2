"""Tracker state transitions: copy state, apply an edit, re-infer attrition rates.

Every operation returns a modified copy; the input state is never mutated.
"""

import copy
import logging
import uuid
from typing import List, Optional

from models.tracker_row import TrackerRow
from models.tracker_state import TrackerState
from models.summary import TrackerResult
from engine.normalizer import clamp_day, to_count, to_number, normalize_destroyed_by_day
from engine.decay_model import infer_daily_attrition_pct
from engine.rollup_engine import run_tracker
from config.defaults import (
    DAYS_IN_WINDOW, DEFAULT_DAY, DEFAULT_USE_ATTRITION, DEFAULT_MANUAL_WINS,
)

logger = logging.getLogger(__name__)

MERGE_MODES = ("replace", "append")

_EDITABLE_FIELDS = {"unit_id", "equipment_type", "on_hand", "destroyed_by_day", "destroyed_manual"}


def _resync(row: TrackerRow, day: int) -> TrackerRow:
    """Normalize counts and daily losses, then re-infer the attrition rate for `day`."""
    if row.destroyed_by_day is None and row.destroyed_manual is not None:
        # Legacy single value counts as confirmed on D1
        row.destroyed_by_day = [to_count(row.destroyed_manual)]
        row.destroyed_manual = None
    by_day = normalize_destroyed_by_day(row.destroyed_by_day)
    row.on_hand = to_count(row.on_hand)
    row.destroyed_by_day = by_day
    row.daily_attrition_pct = infer_daily_attrition_pct(row.on_hand, by_day, day)
    return row


def new_row(day: int = DEFAULT_DAY) -> TrackerRow:
    """A blank row with zeroed daily losses."""
    return _resync(TrackerRow(
        row_id=str(uuid.uuid4()),
        unit_id="",
        equipment_type="",
        on_hand=0,
        daily_attrition_pct=0.0,
        destroyed_by_day=[0] * DAYS_IN_WINDOW,
    ), day)


def refresh_inferred_rates(rows: List[TrackerRow], day: int) -> List[TrackerRow]:
    """Return copies of `rows` with rates re-inferred for the given day."""
    d = clamp_day(day)
    return [_resync(copy.deepcopy(r), d) for r in rows]


def set_day(state: TrackerState, day: int) -> TrackerState:
    new_state = copy.deepcopy(state)
    new_state.day = clamp_day(day)
    new_state.rows = refresh_inferred_rates(new_state.rows, new_state.day)
    return new_state


def add_row(state: TrackerState) -> TrackerState:
    new_state = copy.deepcopy(state)
    new_state.rows.append(new_row(new_state.day))
    return new_state


def update_row(state: TrackerState, row_id: str, **changes) -> TrackerState:
    """Apply field changes to one row; unknown fields are ignored."""
    new_state = copy.deepcopy(state)
    for row in new_state.rows:
        if row.row_id != row_id:
            continue
        for name, value in changes.items():
            if name not in _EDITABLE_FIELDS:
                logger.warning("update_row: ignoring unknown field '%s'", name)
                continue
            setattr(row, name, value)
        _resync(row, new_state.day)
    return new_state


def _day_index(index) -> Optional[int]:
    """Whole-number index into the daily-loss window, or None."""
    if isinstance(index, bool):
        return None
    try:
        idx = int(index)
    except (TypeError, ValueError, OverflowError):
        return None
    return idx if 0 <= idx < DAYS_IN_WINDOW else None


def _flag(value, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def update_destroyed_by_day(state: TrackerState, row_id: str, index: int, value) -> TrackerState:
    """Set a single day's manual destroyed count (index 0 = D1)."""
    new_state = copy.deepcopy(state)
    idx = _day_index(index)
    if idx is None:
        logger.warning("update_destroyed_by_day: index %s outside D1..D%d", index, DAYS_IN_WINDOW)
        return new_state
    for row in new_state.rows:
        if row.row_id != row_id:
            continue
        by_day = normalize_destroyed_by_day(row.destroyed_by_day)
        by_day[idx] = to_count(value)
        row.destroyed_by_day = by_day
        _resync(row, new_state.day)
    return new_state


def delete_row(state: TrackerState, row_id: str) -> TrackerState:
    new_state = copy.deepcopy(state)
    new_state.rows = [r for r in new_state.rows if r.row_id != row_id]
    return new_state


def merge_rows(state: TrackerState, rows: List[TrackerRow], mode: str = "replace") -> TrackerState:
    """Merge imported rows into the state, replacing or appending."""
    if mode not in MERGE_MODES:
        raise ValueError(f"Unsupported merge mode: {mode}. Use one of {MERGE_MODES}.")
    new_state = copy.deepcopy(state)
    incoming = refresh_inferred_rates(rows, new_state.day)
    new_state.rows = incoming if mode == "replace" else new_state.rows + incoming
    logger.info("Merged %d rows (%s); state now holds %d rows", len(incoming), mode, len(new_state.rows))
    return new_state


def state_from_dict(payload: Optional[dict]) -> TrackerState:
    """Rehydrate a state from a plain dict, normalizing every row."""
    st = payload or {}
    day = clamp_day(st.get("day", DEFAULT_DAY))
    use_attrition = _flag(st.get("use_attrition"), DEFAULT_USE_ATTRITION)
    manual_wins = _flag(st.get("manual_wins"), DEFAULT_MANUAL_WINS)
    raw_rows = st.get("rows")
    if not isinstance(raw_rows, list):
        raw_rows = []

    rows = []
    for r in raw_rows:
        if not isinstance(r, dict):
            continue
        rows.append(_resync(TrackerRow(
            row_id=str(r.get("row_id") or uuid.uuid4()),
            unit_id=str(r.get("unit_id") or ""),
            equipment_type=str(r.get("equipment_type") or ""),
            on_hand=to_count(r.get("on_hand")),
            daily_attrition_pct=to_number(r.get("daily_attrition_pct")),
            destroyed_by_day=r.get("destroyed_by_day"),
            destroyed_manual=r.get("destroyed_manual"),
        ), day))

    return TrackerState(day=day, use_attrition=use_attrition, manual_wins=manual_wins, rows=rows)


def state_to_dict(state: TrackerState) -> dict:
    return {
        "day": state.day,
        "use_attrition": state.use_attrition,
        "manual_wins": state.manual_wins,
        "rows": [
            {
                "row_id": r.row_id,
                "unit_id": r.unit_id,
                "equipment_type": r.equipment_type,
                "on_hand": r.on_hand,
                "daily_attrition_pct": r.daily_attrition_pct,
                "destroyed_by_day": normalize_destroyed_by_day(r.destroyed_by_day),
            }
            for r in state.rows
        ],
    }


def run_state(state: TrackerState, rule_config: Optional[dict] = None) -> TrackerResult:
    """Run the tracker pipeline for the state's day and policy switches."""
    return run_tracker(state.rows, state.day, state.use_attrition, state.manual_wins, rule_config)
