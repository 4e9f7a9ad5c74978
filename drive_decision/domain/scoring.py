"""Stress scoring engine - how much strain a monthly car cost puts on a budget"""

from typing import Dict, List, Tuple

from drive_decision.domain.exceptions import InvalidArgumentError
from drive_decision.domain.models import RiskTolerance, StressBreakdown, StressLevel, Thresholds
from drive_decision.domain.policy import DEFAULT_POLICY, DecisionPolicy
from drive_decision.utils.math_utils import clamp

# Lower tolerance -> stricter ratio ceilings and larger required buffers
RISK_THRESHOLDS: Dict[str, Thresholds] = {
    "low": Thresholds(
        ratio_low_max=0.10,
        ratio_med_max=0.15,
        ratio_high_max=0.20,
        buffer_low_min=1200,
        buffer_med_min=600,
        buffer_high_min=0,
    ),
    "medium": Thresholds(
        ratio_low_max=0.12,
        ratio_med_max=0.18,
        ratio_high_max=0.23,
        buffer_low_min=1000,
        buffer_med_min=450,
        buffer_high_min=0,
    ),
    "high": Thresholds(
        ratio_low_max=0.15,
        ratio_med_max=0.20,
        ratio_high_max=0.25,
        buffer_low_min=800,
        buffer_med_min=300,
        buffer_high_min=0,
    ),
}

RATIO_MEANINGFUL_FLAG = "Car cost is a meaningful portion of monthly income."
RATIO_HIGH_FLAG = "Car cost is high relative to monthly income."
RATIO_VERY_HIGH_FLAG = "Car cost is very high relative to monthly income."
BUFFER_TIGHT_FLAG = "Monthly cash buffer is getting tight."
BUFFER_THIN_FLAG = "Very little monthly cash buffer remains after car costs."
BUFFER_NEGATIVE_FLAG = "Negative monthly cash flow after car costs."
RATIO_EXCEEDS_FLAG = "Car costs exceed 25% of take-home pay."
NEGATIVE_CASH_FLOW_FLAG = "This scenario creates negative monthly cash flow."


def thresholds_for_risk_tolerance(tolerance: RiskTolerance) -> Thresholds:
    """Look up the threshold table for a risk tolerance"""
    try:
        return RISK_THRESHOLDS[tolerance]
    except KeyError:
        raise InvalidArgumentError("risk_tolerance", "must be one of low, medium, high") from None


def score_from_ratio(
    ratio: float,
    thresholds: Thresholds,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> Tuple[float, List[str]]:
    """
    Score the car-to-income ratio.

    Bands: 15 / 40 / 65 / 85. Past the high ceiling a continuous penalty of
    up to +15 is added, saturating 10 percentage points over.
    """
    flags: List[str] = []

    if ratio <= thresholds.ratio_low_max:
        score = 15.0
    elif ratio <= thresholds.ratio_med_max:
        score = 40.0
        flags.append(RATIO_MEANINGFUL_FLAG)
    elif ratio <= thresholds.ratio_high_max:
        score = 65.0
        flags.append(RATIO_HIGH_FLAG)
    else:
        score = 85.0
        flags.append(RATIO_VERY_HIGH_FLAG)

    if ratio > thresholds.ratio_high_max:
        over = ratio - thresholds.ratio_high_max
        score += clamp(over / policy.ratio_penalty_span, 0, 1) * policy.ratio_penalty_max

    return clamp(score, 0, 100), flags


def score_from_buffer(
    buffer: float,
    thresholds: Thresholds,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> Tuple[float, List[str]]:
    """
    Score the cash left over each month after fixed expenses and the car.

    Bands: 15 / 40 / 70 / 95. Below zero a continuous penalty of up to +5
    is added, saturating at a $500 deficit.
    """
    flags: List[str] = []

    if buffer >= thresholds.buffer_low_min:
        score = 15.0
    elif buffer >= thresholds.buffer_med_min:
        score = 40.0
        flags.append(BUFFER_TIGHT_FLAG)
    elif buffer >= thresholds.buffer_high_min:
        score = 70.0
        flags.append(BUFFER_THIN_FLAG)
    else:
        score = 95.0
        flags.append(BUFFER_NEGATIVE_FLAG)

    if buffer < 0:
        deficit = abs(buffer)
        score += clamp(deficit / policy.buffer_penalty_span, 0, 1) * policy.buffer_penalty_max

    return clamp(score, 0, 100), flags


def level_from_score(score: float, policy: DecisionPolicy = DEFAULT_POLICY) -> StressLevel:
    if score >= policy.high_stress_min:
        return "high"
    if score >= policy.medium_stress_min:
        return "medium"
    return "low"


def score_monthly_stress(
    monthly_net_income: float,
    monthly_fixed_expenses: float,
    monthly_car_all_in: float,
    risk_tolerance: RiskTolerance,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> StressBreakdown:
    """
    Compute a 0-100 stress score (higher = worse) for a monthly all-in car cost.

    The buffer component is weighted above the ratio component since running
    out of cash each month is the failure that actually hurts buyers.

    Flags are deduplicated by exact string only. The two extreme-case flags
    can restate a band flag in different words; both are kept.
    """
    if monthly_net_income <= 0:
        raise InvalidArgumentError("monthly_net_income", "must be > 0")
    if monthly_fixed_expenses < 0:
        raise InvalidArgumentError("monthly_fixed_expenses", "must be >= 0")
    if monthly_car_all_in < 0:
        raise InvalidArgumentError("monthly_car_all_in", "must be >= 0")

    thresholds = thresholds_for_risk_tolerance(risk_tolerance)

    car_to_income_ratio = monthly_car_all_in / monthly_net_income
    post_car_buffer = monthly_net_income - monthly_fixed_expenses - monthly_car_all_in

    ratio_score, ratio_flags = score_from_ratio(car_to_income_ratio, thresholds, policy)
    buffer_score, buffer_flags = score_from_buffer(post_car_buffer, thresholds, policy)

    stress_score = clamp(
        ratio_score * policy.ratio_weight + buffer_score * policy.buffer_weight, 0, 100
    )

    flags = list(dict.fromkeys(ratio_flags + buffer_flags))

    if car_to_income_ratio >= policy.ratio_flag_threshold:
        flags.append(RATIO_EXCEEDS_FLAG)
    if post_car_buffer < 0:
        flags.append(NEGATIVE_CASH_FLOW_FLAG)

    return StressBreakdown(
        car_to_income_ratio=car_to_income_ratio,
        post_car_buffer=post_car_buffer,
        stress_score=stress_score,
        stress_level=level_from_score(stress_score, policy),
        flags=tuple(flags),
    )


def simulate_income_shock(
    monthly_net_income: float,
    monthly_fixed_expenses: float,
    monthly_car_all_in: float,
    risk_tolerance: RiskTolerance,
    income_drop_percent: float,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> StressBreakdown:
    """Re-score stress after an income drop to gauge fragility"""
    if not 0 <= income_drop_percent <= policy.max_income_shock_percent:
        raise InvalidArgumentError(
            "income_drop_percent",
            f"must be between 0 and {policy.max_income_shock_percent:g}",
        )

    shocked_income = monthly_net_income * (1 - income_drop_percent / 100)

    return score_monthly_stress(
        monthly_net_income=shocked_income,
        monthly_fixed_expenses=monthly_fixed_expenses,
        monthly_car_all_in=monthly_car_all_in,
        risk_tolerance=risk_tolerance,
        policy=policy,
    )
