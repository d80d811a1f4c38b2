"""Tests for spreadsheet loading, validation, and export."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date

import pandas as pd
import pytest

from data.loader import parse_tracker_rows, load_file, load_tracker_file, match_columns
from data.validator import validate_tracker_sheet
from data.exporter import (
    rows_to_frame,
    export_filename,
    export_tracker_excel,
    export_summary_excel,
)
from data.sample_data import generate_sample_rows, generate_tracker_df, generate_sample_csv
from engine.rollup_engine import run_tracker
from config.defaults import EXPORT_COLUMNS, EXPORT_SHEET_NAME


def make_sheet(**overrides):
    data = {
        "BN": ["1651", "1652"],
        "Equipment Type": ["Type 96 MBT", "Type 99 MBT"],
        "On Hand": [44, 33],
        "Destroyed D1": [1, 0],
        "Destroyed D2": [0, 2],
        "Destroyed D3": [0, 0],
        "Destroyed D4": [0, 0],
        "Destroyed D5": [0, 0],
    }
    data.update(overrides)
    return pd.DataFrame(data)


class TestParseTrackerRows:
    def test_standard_headers(self):
        rows = parse_tracker_rows(make_sheet(), day=1)
        assert len(rows) == 2
        assert rows[0].unit_id == "1651"
        assert rows[0].on_hand == 44
        assert rows[0].destroyed_by_day == [1, 0, 0, 0, 0]
        assert rows[0].daily_attrition_pct == pytest.approx(100 / 44)
        assert rows[1].daily_attrition_pct == 0  # D2 loss not yet applied on day 1

    def test_header_variants(self):
        df = pd.DataFrame({
            "battalion ": ["1653"],
            "EQUIPMENT": ["BMP-2"],
            "onhand": [12],
            "D1": [0],
            "Day 2 Destroyed": [3],
        })
        rows = parse_tracker_rows(df, day=2)
        assert rows[0].unit_id == "1653"
        assert rows[0].equipment_type == "BMP-2"
        assert rows[0].on_hand == 12
        assert rows[0].destroyed_by_day == [0, 3, 0, 0, 0]

    def test_legacy_destroyed_column(self):
        df = pd.DataFrame({"Unit": ["A"], "Equipment": ["Truck"], "On Hand": [10], "Destroyed": [4]})
        rows = parse_tracker_rows(df)
        assert rows[0].destroyed_by_day == [4, 0, 0, 0, 0]

    def test_daily_columns_win_over_legacy(self):
        df = make_sheet(Destroyed=[9, 9])
        rows = parse_tracker_rows(df)
        assert rows[0].destroyed_by_day == [1, 0, 0, 0, 0]

    def test_blank_rows_skipped(self):
        df = make_sheet(BN=["1651", ""], **{"Equipment Type": ["Type 96 MBT", None]})
        rows = parse_tracker_rows(df)
        assert len(rows) == 1

    def test_garbage_numbers(self):
        df = make_sheet(**{"On Hand": ["lots", -3], "Destroyed D1": ["?", 1.7]})
        rows = parse_tracker_rows(df)
        assert rows[0].on_hand == 0
        assert rows[0].destroyed_by_day[0] == 0
        assert rows[1].on_hand == 0
        assert rows[1].destroyed_by_day[0] == 1

    def test_match_columns_first_alias_wins(self):
        cols = match_columns(["Unit", "BN", "Equipment Type"])
        assert cols["unit_id"] == "BN"


class TestLoadFile:
    def test_unsupported_format(self):
        with pytest.raises(ValueError):
            load_file("tracker.txt")

    def test_csv(self, tmp_path):
        path = generate_sample_csv(str(tmp_path))
        rows = load_tracker_file(path, day=1)
        assert [r.unit_id for r in rows] == ["1651", "1651", "1652"]

    def test_exported_workbook_reimports(self, tmp_path):
        rows = generate_sample_rows(day=1)
        path = export_tracker_excel(rows, str(tmp_path), day=1, on_date=date(2026, 10, 19))

        reloaded = load_tracker_file(path, day=1)
        assert [r.destroyed_by_day for r in reloaded] == [r.destroyed_by_day for r in rows]
        assert [r.on_hand for r in reloaded] == [44, 33, 44]
        assert pd.ExcelFile(path, engine="openpyxl").sheet_names == [EXPORT_SHEET_NAME]


class TestValidateTrackerSheet:
    def test_valid_sheet(self):
        result = validate_tracker_sheet(generate_tracker_df())
        assert result.is_valid
        assert result.errors == []

    def test_missing_identifier_columns(self):
        result = validate_tracker_sheet(pd.DataFrame({"On Hand": [1]}))
        assert not result.is_valid
        assert "BN and Equipment Type" in result.errors[0]

    def test_empty_sheet(self):
        result = validate_tracker_sheet(pd.DataFrame(columns=["BN", "Equipment Type"]))
        assert not result.is_valid

    def test_warnings(self):
        df = make_sheet(
            BN=["1651", "1651"],
            **{"Equipment Type": ["T-72", "T-72"], "On Hand": [2, -1], "Destroyed D1": [5, -2]},
        )
        result = validate_tracker_sheet(df)
        assert result.is_valid
        text = " ".join(result.warnings)
        assert "Negative On Hand" in text
        assert "Negative destroyed" in text
        assert "more destroyed than on hand" in text
        assert "Duplicate" in text

    def test_missing_on_hand_is_warning(self):
        df = pd.DataFrame({"BN": ["A"], "Equipment Type": ["Truck"]})
        result = validate_tracker_sheet(df)
        assert result.is_valid
        assert len(result.warnings) == 2


class TestExport:
    def test_filename(self):
        assert export_filename(3, date(2026, 10, 19)) == "bda_tracker_day3_2026-10-19.xlsx"
        assert export_filename(11, date(2026, 1, 2)) == "bda_tracker_day5_2026-01-02.xlsx"

    def test_rows_to_frame_layout(self):
        df = rows_to_frame(generate_sample_rows())
        assert list(df.columns) == EXPORT_COLUMNS
        assert df["Destroyed D3"].tolist() == [0, 2, 0]

    def test_summary_workbook(self, tmp_path):
        result = run_tracker(generate_sample_rows(day=2), day=2)
        path = export_summary_excel(result, str(tmp_path / "summary.xlsx"))

        xl = pd.ExcelFile(path, engine="openpyxl")
        assert xl.sheet_names == ["Rows", "Units", "Groups"]
        groups = pd.read_excel(xl, sheet_name="Groups")
        assert len(groups) == 3
        assert groups["On Hand"].tolist()[-1] == 121


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
