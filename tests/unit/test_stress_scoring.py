"""Unit tests for stress scoring logic"""

import pytest
from drive_decision.domain.exceptions import InvalidArgumentError
from drive_decision.domain.scoring import (
    BUFFER_NEGATIVE_FLAG,
    BUFFER_THIN_FLAG,
    BUFFER_TIGHT_FLAG,
    NEGATIVE_CASH_FLOW_FLAG,
    RATIO_EXCEEDS_FLAG,
    RATIO_HIGH_FLAG,
    RATIO_MEANINGFUL_FLAG,
    RATIO_VERY_HIGH_FLAG,
    score_from_buffer,
    score_from_ratio,
    score_monthly_stress,
    simulate_income_shock,
    thresholds_for_risk_tolerance,
)


def test_threshold_table_values():
    """Risk tolerance lookup reproduces the policy table exactly"""
    low = thresholds_for_risk_tolerance("low")
    assert (low.ratio_low_max, low.ratio_med_max, low.ratio_high_max) == (0.10, 0.15, 0.20)
    assert (low.buffer_low_min, low.buffer_med_min, low.buffer_high_min) == (1200, 600, 0)

    medium = thresholds_for_risk_tolerance("medium")
    assert (medium.ratio_low_max, medium.ratio_med_max, medium.ratio_high_max) == (0.12, 0.18, 0.23)
    assert (medium.buffer_low_min, medium.buffer_med_min, medium.buffer_high_min) == (1000, 450, 0)

    high = thresholds_for_risk_tolerance("high")
    assert (high.ratio_low_max, high.ratio_med_max, high.ratio_high_max) == (0.15, 0.20, 0.25)
    assert (high.buffer_low_min, high.buffer_med_min, high.buffer_high_min) == (800, 300, 0)


def test_unknown_risk_tolerance_rejected():
    with pytest.raises(InvalidArgumentError, match="risk_tolerance"):
        thresholds_for_risk_tolerance("reckless")


def test_score_from_ratio_bands():
    """Medium tolerance: 0.12 / 0.18 / 0.23 ceilings"""
    t = thresholds_for_risk_tolerance("medium")

    assert score_from_ratio(0.10, t) == (15, [])
    assert score_from_ratio(0.15, t) == (40, [RATIO_MEANINGFUL_FLAG])
    assert score_from_ratio(0.20, t) == (65, [RATIO_HIGH_FLAG])

    score, flags = score_from_ratio(0.28, t)
    # 85 + (0.05 / 0.10) * 15
    assert score == pytest.approx(92.5)
    assert flags == [RATIO_VERY_HIGH_FLAG]


def test_score_from_ratio_penalty_saturates():
    t = thresholds_for_risk_tolerance("medium")
    score, _ = score_from_ratio(0.90, t)
    assert score == 100


def test_score_from_buffer_bands():
    t = thresholds_for_risk_tolerance("medium")

    assert score_from_buffer(1500, t) == (15, [])
    assert score_from_buffer(600, t) == (40, [BUFFER_TIGHT_FLAG])
    assert score_from_buffer(100, t) == (70, [BUFFER_THIN_FLAG])
    assert score_from_buffer(0, t) == (70, [BUFFER_THIN_FLAG])

    score, flags = score_from_buffer(-250, t)
    # 95 + (250 / 500) * 5
    assert score == pytest.approx(97.5)
    assert flags == [BUFFER_NEGATIVE_FLAG]

    score, _ = score_from_buffer(-5000, t)
    assert score == 100


def test_score_monthly_stress_comfortable():
    breakdown = score_monthly_stress(
        monthly_net_income=8000,
        monthly_fixed_expenses=2000,
        monthly_car_all_in=500,
        risk_tolerance="medium",
    )

    assert breakdown.car_to_income_ratio == pytest.approx(0.0625)
    assert breakdown.post_car_buffer == 5500
    # 15 * 0.45 + 15 * 0.55
    assert breakdown.stress_score == pytest.approx(15)
    assert breakdown.stress_level == "low"
    assert breakdown.flags == ()


def test_score_monthly_stress_extreme_case_keeps_redundant_flags():
    """Band flags and extreme-case flags overlap in meaning; both are kept"""
    breakdown = score_monthly_stress(
        monthly_net_income=4000,
        monthly_fixed_expenses=3500,
        monthly_car_all_in=1200,
        risk_tolerance="medium",
    )

    assert breakdown.car_to_income_ratio == pytest.approx(0.30)
    assert breakdown.post_car_buffer == -700
    # ratio: 85 + 0.7 * 15 = 95.5; buffer: 95 + 5 = 100
    assert breakdown.stress_score == pytest.approx(95.5 * 0.45 + 100 * 0.55)
    assert breakdown.stress_level == "high"
    assert breakdown.flags == (
        RATIO_VERY_HIGH_FLAG,
        BUFFER_NEGATIVE_FLAG,
        RATIO_EXCEEDS_FLAG,
        NEGATIVE_CASH_FLOW_FLAG,
    )


def test_score_monthly_stress_medium_level():
    breakdown = score_monthly_stress(
        monthly_net_income=5000,
        monthly_fixed_expenses=3800,
        monthly_car_all_in=850,
        risk_tolerance="medium",
    )
    # ratio 0.17 -> 40; buffer 350 -> 70; 18 + 38.5
    assert breakdown.stress_score == pytest.approx(56.5)
    assert breakdown.stress_level == "medium"


def test_lower_tolerance_scores_stricter():
    args = dict(monthly_net_income=6000, monthly_fixed_expenses=4000, monthly_car_all_in=850)
    low = score_monthly_stress(risk_tolerance="low", **args)
    high = score_monthly_stress(risk_tolerance="high", **args)
    assert low.stress_score > high.stress_score


@pytest.mark.parametrize(
    "income, fixed, car, field",
    [
        (0, 1000, 500, "monthly_net_income"),
        (5000, -1, 500, "monthly_fixed_expenses"),
        (5000, 1000, -10, "monthly_car_all_in"),
    ],
)
def test_score_monthly_stress_rejects_bad_inputs(income, fixed, car, field):
    with pytest.raises(InvalidArgumentError) as exc_info:
        score_monthly_stress(
            monthly_net_income=income,
            monthly_fixed_expenses=fixed,
            monthly_car_all_in=car,
            risk_tolerance="medium",
        )
    assert exc_info.value.field == field


def test_income_shock_rescales_income():
    shocked = simulate_income_shock(
        monthly_net_income=5000,
        monthly_fixed_expenses=3000,
        monthly_car_all_in=600,
        risk_tolerance="medium",
        income_drop_percent=20,
    )
    baseline = score_monthly_stress(
        monthly_net_income=4000,
        monthly_fixed_expenses=3000,
        monthly_car_all_in=600,
        risk_tolerance="medium",
    )
    assert shocked == baseline


def test_income_shock_zero_matches_baseline():
    args = dict(monthly_net_income=5000, monthly_fixed_expenses=3000, monthly_car_all_in=600, risk_tolerance="high")
    assert simulate_income_shock(income_drop_percent=0, **args) == score_monthly_stress(**args)


@pytest.mark.parametrize("drop", [-1, 80.5, 100])
def test_income_shock_out_of_range(drop):
    with pytest.raises(InvalidArgumentError, match="income_drop_percent"):
        simulate_income_shock(
            monthly_net_income=5000,
            monthly_fixed_expenses=3000,
            monthly_car_all_in=600,
            risk_tolerance="medium",
            income_drop_percent=drop,
        )
