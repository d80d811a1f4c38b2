"""Spreadsheet export of tracker rows and computed summaries."""

import logging
import os
from datetime import date
from typing import List, Optional, Union

import pandas as pd

from models.tracker_row import TrackerRow
from models.computed_row import ComputedRow
from models.summary import UnitSummary, GroupSummary, TrackerResult
from engine.normalizer import clamp_day, normalize_destroyed_by_day
from config.defaults import EXPORT_COLUMNS, EXPORT_SHEET_NAME

logger = logging.getLogger(__name__)


def rows_to_frame(rows: List[TrackerRow]) -> pd.DataFrame:
    """Input rows in the re-importable sheet layout (BN, Equipment Type, On Hand, D1..D5)."""
    data = []
    for r in rows:
        by_day = normalize_destroyed_by_day(r.destroyed_by_day)
        record = {
            "BN": r.unit_id or "",
            "Equipment Type": r.equipment_type or "",
            "On Hand": r.on_hand or 0,
        }
        for i, v in enumerate(by_day, start=1):
            record[f"Destroyed D{i}"] = v
        data.append(record)
    return pd.DataFrame(data, columns=EXPORT_COLUMNS)


def computed_rows_to_frame(computed_rows: List[ComputedRow]) -> pd.DataFrame:
    return pd.DataFrame([{
        "BN": r.unit_id,
        "Equipment Type": r.equipment_type,
        "On Hand": r.on_hand,
        "Attrition %/Day": round(r.daily_attrition_pct, 4),
        "Manual Destroyed (Active)": r.destroyed_manual_active,
        "Manual Destroyed (Total)": r.destroyed_manual_total,
        "Attrition Destroyed": r.destroyed_attrition,
        "Destroyed": r.destroyed,
        "Remaining": r.remaining,
        "Combat Power %": round(r.combat_power_pct, 1),
        "Destroyed %": round(r.destroyed_pct, 1),
        "Days to Threshold": r.days_to_threshold,
    } for r in computed_rows])


def summaries_to_frame(summaries: List[Union[UnitSummary, GroupSummary]]) -> pd.DataFrame:
    records = []
    for s in summaries:
        name = s.unit_id if isinstance(s, UnitSummary) else s.group_name
        records.append({
            "Name": name,
            "On Hand": s.on_hand,
            "Remaining": s.remaining,
            "Destroyed": s.destroyed,
            "Combat Power %": round(s.combat_power_pct, 1),
            "Weighted Attrition %/Day": round(s.weighted_attrition_pct, 4),
            "Days to Threshold": s.days_to_threshold,
        })
    return pd.DataFrame(records)


def export_filename(day: int, on_date: Optional[date] = None) -> str:
    on_date = on_date or date.today()
    return f"bda_tracker_day{clamp_day(day)}_{on_date.isoformat()}.xlsx"


def export_tracker_excel(
    rows: List[TrackerRow],
    output_dir: str,
    day: int,
    on_date: Optional[date] = None,
) -> str:
    """Write rows to a single-sheet workbook and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, export_filename(day, on_date))
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        rows_to_frame(rows).to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)
    logger.info("Exported %d rows to %s", len(rows), path)
    return path


def export_summary_excel(result: TrackerResult, path: str) -> str:
    """Write computed rows, unit summaries and group summaries to one workbook."""
    groups = list(result.group_summaries)
    if result.force_total is not None:
        groups.append(result.force_total)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        computed_rows_to_frame(result.computed_rows).to_excel(writer, sheet_name="Rows", index=False)
        summaries_to_frame(result.unit_summaries).to_excel(writer, sheet_name="Units", index=False)
        summaries_to_frame(groups).to_excel(writer, sheet_name="Groups", index=False)
    logger.info("Exported day %d summary to %s", result.day, path)
    return path
