"""Tests for the compound attrition model and rate inference."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from engine.decay_model import remaining_after_days, infer_daily_attrition_pct
from engine.normalizer import round_half_up


class TestRemainingAfterDays:
    def test_half_rate_two_days(self):
        assert remaining_after_days(100, 50, 2) == pytest.approx(25.0)

    def test_total_loss_rate(self):
        for on_hand in [1, 44, 1000]:
            assert remaining_after_days(on_hand, 100, 1) == 0

    def test_zero_or_negative_start(self):
        assert remaining_after_days(0, 10, 3) == 0
        assert remaining_after_days(-5, 10, 3) == 0

    def test_no_attrition(self):
        assert remaining_after_days(44, 0, 5) == 44
        assert remaining_after_days(44, -10, 5) == 44

    def test_day_is_floored(self):
        assert remaining_after_days(100, 50, 2.9) == pytest.approx(25.0)
        assert remaining_after_days(100, 50, 0) == 100

    def test_bounded_by_on_hand(self):
        for on_hand in [1, 7, 44, 250]:
            for rate in [0, 0.5, 12.5, 50, 99.9, 100]:
                for day in range(1, 6):
                    rem = remaining_after_days(on_hand, rate, day)
                    assert 0 <= rem <= on_hand

    def test_non_increasing_in_day(self):
        for rate in [0, 3, 25, 80]:
            values = [remaining_after_days(44, rate, d) for d in range(0, 6)]
            assert all(a >= b for a, b in zip(values, values[1:]))


class TestInferDailyAttritionPct:
    def test_single_loss_on_day_one(self):
        rate = infer_daily_attrition_pct(44, [1, 0, 0, 0, 0], 1)
        assert rate == pytest.approx(100 / 44)
        assert round_half_up(remaining_after_days(44, rate, 1)) == 43

    def test_loss_after_selected_day_is_ignored(self):
        assert infer_daily_attrition_pct(44, [0, 1, 0, 0, 0], 1) == 0

    def test_loss_spread_over_two_days(self):
        rate = infer_daily_attrition_pct(44, [0, 1, 0, 0, 0], 2)
        assert rate == pytest.approx((1 - (43 / 44) ** 0.5) * 100)

    def test_total_loss_is_full_rate(self):
        assert infer_daily_attrition_pct(10, [10, 0, 0, 0, 0], 1) == 100
        assert infer_daily_attrition_pct(10, [6, 6, 0, 0, 0], 2) == 100

    def test_zero_on_hand(self):
        assert infer_daily_attrition_pct(0, [3, 0, 0, 0, 0], 1) == 0

    def test_day_is_clamped(self):
        by_day = [1, 1, 1, 1, 1]
        assert infer_daily_attrition_pct(50, by_day, 9) == infer_daily_attrition_pct(50, by_day, 5)
        assert infer_daily_attrition_pct(50, by_day, 0) == infer_daily_attrition_pct(50, by_day, 1)

    def test_malformed_losses(self):
        assert infer_daily_attrition_pct(20, None, 3) == 0
        assert infer_daily_attrition_pct(20, ["x", -2], 3) == 0

    def test_inferred_rate_reproduces_losses(self):
        loss_patterns = [
            [0, 0, 0, 0, 0],
            [1, 0, 0, 0, 0],
            [0, 2, 1, 0, 3],
            [5, 5, 5, 5, 5],
            [40, 0, 0, 0, 0],
        ]
        for on_hand in [1, 7, 44, 100, 250]:
            for by_day in loss_patterns:
                for day in range(1, 6):
                    rate = infer_daily_attrition_pct(on_hand, by_day, day)
                    assert 0 <= rate <= 100
                    modeled = round_half_up(on_hand - remaining_after_days(on_hand, rate, day))
                    observed = min(sum(by_day[:day]), on_hand)
                    assert abs(modeled - observed) <= 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
