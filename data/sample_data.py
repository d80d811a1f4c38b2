"""Generate sample tracker datasets for the BDA Tracker."""

import os
from typing import List

import pandas as pd

from models.tracker_row import TrackerRow
from models.tracker_state import TrackerState
from engine.decay_model import infer_daily_attrition_pct
from config.defaults import DEFAULT_DAY, EXPORT_SHEET_NAME

SAMPLE_ROWS = [
    {"row_id": "1", "BN": "1651", "Equipment Type": "Type 96 MBT", "On Hand": 44, "D": [0, 1, 0, 0, 0]},
    {"row_id": "2", "BN": "1651", "Equipment Type": "Type 99 MBT", "On Hand": 33, "D": [0, 0, 2, 0, 0]},
    {"row_id": "3", "BN": "1652", "Equipment Type": "Type 96 MBT", "On Hand": 44, "D": [1, 0, 0, 0, 0]},
]


def generate_sample_rows(day: int = DEFAULT_DAY) -> List[TrackerRow]:
    """The default three-row tracker with rates inferred for `day`."""
    return [
        TrackerRow(
            row_id=s["row_id"],
            unit_id=s["BN"],
            equipment_type=s["Equipment Type"],
            on_hand=s["On Hand"],
            daily_attrition_pct=infer_daily_attrition_pct(s["On Hand"], s["D"], day),
            destroyed_by_day=list(s["D"]),
        )
        for s in SAMPLE_ROWS
    ]


def generate_sample_state(day: int = DEFAULT_DAY) -> TrackerState:
    return TrackerState(day=day, use_attrition=True, manual_wins=True, rows=generate_sample_rows(day))


def generate_tracker_df() -> pd.DataFrame:
    """Sample rows in the spreadsheet layout."""
    records = []
    for s in SAMPLE_ROWS:
        record = {"BN": s["BN"], "Equipment Type": s["Equipment Type"], "On Hand": s["On Hand"]}
        for i, v in enumerate(s["D"], start=1):
            record[f"Destroyed D{i}"] = v
        records.append(record)
    return pd.DataFrame(records)


def generate_sample_csv(output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "tracker.csv")
    generate_tracker_df().to_csv(path, index=False)
    return path


def generate_sample_excel(output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sample_tracker.xlsx")
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        generate_tracker_df().to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)
    return path


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_csv(out)
    generate_sample_excel(out)
    print("Sample CSV and Excel files generated in sample_files/")
