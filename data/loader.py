"""File upload parsing: CSV/XLSX tracker sheets into TrackerRow lists."""

import logging
import re
import uuid
from typing import Dict, List, Optional

import pandas as pd

from models.tracker_row import TrackerRow
from engine.normalizer import to_count, to_number, normalize_destroyed_by_day
from engine.decay_model import infer_daily_attrition_pct
from config.defaults import DEFAULT_DAY, DAYS_IN_WINDOW

logger = logging.getLogger(__name__)

# Accepted header spellings per field (matched case- and whitespace-insensitively)
COLUMN_ALIASES = {
    "unit_id": ["BN", "Bn", "Battalion", "Unit"],
    "equipment_type": ["Equipment Type", "Equipment"],
    "on_hand": ["On Hand", "OnHand"],
    "destroyed_legacy": ["Destroyed"],
}
for _d in range(1, DAYS_IN_WINDOW + 1):
    COLUMN_ALIASES[f"destroyed_d{_d}"] = [
        f"Destroyed D{_d}",
        f"Destroyed Day {_d}",
        f"D{_d}",
        f"Day {_d} Destroyed",
        f"Destroyed {_d}",
    ]


def normalize_header(name) -> str:
    return re.sub(r"\s+", " ", str(name or "").strip().lower())


def match_columns(columns) -> Dict[str, str]:
    """Map each known field to the first matching column in `columns`."""
    lower_map = {}
    for col in columns:
        lower_map.setdefault(normalize_header(col), col)

    matched = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            col = lower_map.get(normalize_header(alias))
            if col is not None:
                matched[field_name] = col
                break
    return matched


def _cell_text(row, col: Optional[str]) -> str:
    if col is None:
        return ""
    value = row.get(col)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    # Numeric BN columns with blanks come back as floats (1651.0)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _cell_number(row, col: Optional[str]) -> float:
    if col is None:
        return 0.0
    return to_number(row.get(col))


def parse_tracker_rows(df: pd.DataFrame, day: int = DEFAULT_DAY) -> List[TrackerRow]:
    """Convert a tracker DataFrame into TrackerRow objects.

    Rows with neither a unit nor an equipment type are skipped. When every
    daily column is zero, a legacy "Destroyed" value is applied to D1.
    Each row's attrition rate is inferred for `day`.
    """
    cols = match_columns(df.columns)
    rows = []
    skipped = 0
    for _, r in df.iterrows():
        unit_id = _cell_text(r, cols.get("unit_id"))
        equipment_type = _cell_text(r, cols.get("equipment_type"))
        if not unit_id and not equipment_type:
            skipped += 1
            continue

        on_hand = _cell_number(r, cols.get("on_hand"))
        daily = [_cell_number(r, cols.get(f"destroyed_d{d}")) for d in range(1, DAYS_IN_WINDOW + 1)]
        legacy = _cell_number(r, cols.get("destroyed_legacy"))

        raw_by_day = daily if sum(daily) > 0 else [legacy]
        by_day = normalize_destroyed_by_day(raw_by_day)
        oh = to_count(on_hand)

        rows.append(TrackerRow(
            row_id=str(uuid.uuid4()),
            unit_id=unit_id,
            equipment_type=equipment_type,
            on_hand=oh,
            daily_attrition_pct=infer_daily_attrition_pct(oh, by_day, day),
            destroyed_by_day=by_day,
        ))

    if skipped:
        logger.warning("Skipped %d rows with no BN or equipment type", skipped)
    logger.info("Parsed %d tracker rows", len(rows))
    return rows


def load_file(uploaded_file) -> pd.DataFrame:
    """Load a file (CSV or XLSX) into a DataFrame.

    Accepts a path or a file-like object with a `name` attribute.
    """
    name = str(getattr(uploaded_file, "name", uploaded_file)).lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")


def load_tracker_file(uploaded_file, day: int = DEFAULT_DAY) -> List[TrackerRow]:
    """Load and parse a tracker sheet in one step (first sheet for workbooks)."""
    return parse_tracker_rows(load_file(uploaded_file), day)
