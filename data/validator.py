"""Schema validation for uploaded tracker sheets."""

from dataclasses import dataclass, field
from typing import List

import pandas as pd

from data.loader import match_columns
from config.defaults import DAYS_IN_WINDOW


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _numeric(df: pd.DataFrame, col: str) -> pd.Series:
    return pd.to_numeric(df[col], errors="coerce").fillna(0)


def validate_tracker_sheet(df: pd.DataFrame, file_label: str = "Tracker") -> ValidationResult:
    """Check a tracker sheet before parsing.

    Missing identifier columns or an empty sheet are errors; everything the
    parser can normalize away is reported as a warning.
    """
    result = ValidationResult()
    cols = match_columns(df.columns)

    if "unit_id" not in cols and "equipment_type" not in cols:
        result.is_valid = False
        result.errors.append(
            f"{file_label}: No usable rows found. Make sure your sheet has BN and Equipment Type columns."
        )
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    if not result.is_valid:
        return result

    if "on_hand" not in cols:
        result.warnings.append(f"{file_label}: No On Hand column; every row will start at 0.")
    else:
        on_hand = _numeric(df, cols["on_hand"])
        if (on_hand < 0).any():
            result.warnings.append(f"{file_label}: Negative On Hand values will be treated as 0.")

    day_cols = [cols[f"destroyed_d{d}"] for d in range(1, DAYS_IN_WINDOW + 1) if f"destroyed_d{d}" in cols]
    if not day_cols and "destroyed_legacy" not in cols:
        result.warnings.append(f"{file_label}: No Destroyed columns; manual losses will be 0.")

    if day_cols:
        daily = pd.concat([_numeric(df, c) for c in day_cols], axis=1)
        if (daily < 0).any().any():
            result.warnings.append(f"{file_label}: Negative destroyed counts will be treated as 0.")
        if "on_hand" in cols:
            over = daily.clip(lower=0).sum(axis=1) > _numeric(df, cols["on_hand"])
            if over.any():
                result.warnings.append(
                    f"{file_label}: {int(over.sum())} row(s) report more destroyed than on hand; "
                    "losses will be capped at on hand."
                )

    if "unit_id" in cols and "equipment_type" in cols:
        dupes = df.duplicated(subset=[cols["unit_id"], cols["equipment_type"]], keep=False)
        if dupes.any():
            pairs = df[dupes][[cols["unit_id"], cols["equipment_type"]]].drop_duplicates()
            result.warnings.append(
                f"{file_label}: Duplicate BN/equipment entries: {pairs.to_dict('records')}"
            )

    return result
