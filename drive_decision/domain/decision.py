"""Buy-vs-lease decision engine - core business logic for the recommendation"""

import math
from dataclasses import dataclass
from typing import List

from drive_decision.domain.exceptions import InvalidArgumentError
from drive_decision.domain.models import (
    BuyScenario,
    Confidence,
    DecisionResult,
    LeaseScenario,
    StressBreakdown,
    UserProfile,
    Verdict,
)
from drive_decision.domain.policy import DEFAULT_POLICY, DecisionPolicy
from drive_decision.domain.scoring import score_monthly_stress, simulate_income_shock
from drive_decision.utils.math_utils import (
    MAX_SAFE_MONEY,
    assert_finite,
    clamp,
    monthly_payment_from_loan,
    round_half_up,
)

NEGATIVE_CASH_MARKER = "negative monthly cash flow"


@dataclass(frozen=True)
class BuyCosts:
    monthly_payment: float
    monthly_all_in: float
    total_cost: float


@dataclass(frozen=True)
class LeaseCosts:
    monthly_all_in: float
    total_cost: float
    excess_mileage_cost_total: float
    buyout_cost: float


def _require_positive(name: str, value: float) -> None:
    assert_finite(name, value)
    if value <= 0:
        raise InvalidArgumentError(name, "must be > 0")


def _require_non_negative(name: str, value: float) -> None:
    assert_finite(name, value)
    if value < 0:
        raise InvalidArgumentError(name, "must be >= 0")


def _require_whole_months(name: str, value: float) -> None:
    _require_positive(name, value)
    if value != int(value):
        raise InvalidArgumentError(name, "must be a whole number of months")


def validate_inputs(user: UserProfile, buy: BuyScenario, lease: LeaseScenario) -> None:
    """Fail fast on the first field that violates its precondition"""
    _require_positive("user.monthly_net_income", user.monthly_net_income)
    _require_non_negative("user.monthly_fixed_expenses", user.monthly_fixed_expenses)
    _require_non_negative("user.current_savings", user.current_savings)

    _require_positive("buy.vehicle_price", buy.vehicle_price)
    _require_non_negative("buy.down_payment", buy.down_payment)
    _require_non_negative("buy.apr_percent", buy.apr_percent)
    _require_whole_months("buy.term_months", buy.term_months)
    _require_non_negative("buy.est_monthly_insurance", buy.est_monthly_insurance)
    _require_non_negative("buy.est_monthly_maintenance", buy.est_monthly_maintenance)
    _require_whole_months("buy.ownership_months", buy.ownership_months)
    if buy.down_payment > buy.vehicle_price:
        raise InvalidArgumentError("buy.down_payment", "must be <= buy.vehicle_price")

    _require_positive("lease.msrp", lease.msrp)
    _require_non_negative("lease.monthly_payment", lease.monthly_payment)
    _require_non_negative("lease.due_at_signing", lease.due_at_signing)
    _require_whole_months("lease.term_months", lease.term_months)
    _require_positive("lease.mileage_allowance_per_year", lease.mileage_allowance_per_year)
    _require_positive("lease.est_miles_per_year", lease.est_miles_per_year)
    _require_non_negative("lease.est_excess_mile_fee", lease.est_excess_mile_fee)
    _require_non_negative("lease.est_monthly_insurance", lease.est_monthly_insurance)
    _require_non_negative("lease.est_monthly_maintenance", lease.est_monthly_maintenance)

    if lease.lease_end_plan not in ("return", "buyout"):
        raise InvalidArgumentError("lease.lease_end_plan", "must be return or buyout")
    if lease.lease_end_plan == "buyout":
        if lease.est_buyout_price is None:
            raise InvalidArgumentError("lease.est_buyout_price", "is required when lease_end_plan is buyout")
        _require_positive("lease.est_buyout_price", lease.est_buyout_price)


def calculate_buy_costs(
    buy: BuyScenario,
    horizon_months: int,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> BuyCosts:
    """
    Monthly and horizon-total cost of financing.

    The payment amount comes from the loan's own term; only the number of
    payments counted is bounded by the horizon.
    """
    principal = max(0.0, buy.vehicle_price - buy.down_payment)
    monthly_payment = monthly_payment_from_loan(principal, buy.apr_percent, buy.term_months)
    running_costs = buy.est_monthly_insurance + buy.est_monthly_maintenance

    payment_months = horizon_months
    if policy.stop_buy_payments_after_payoff:
        payment_months = min(horizon_months, buy.term_months)

    total_cost = (
        buy.down_payment
        + monthly_payment * payment_months
        + running_costs * horizon_months
    )

    return BuyCosts(
        monthly_payment=monthly_payment,
        monthly_all_in=monthly_payment + running_costs,
        total_cost=total_cost,
    )


def calculate_lease_costs(lease: LeaseScenario, horizon_months: int) -> LeaseCosts:
    """
    Monthly and horizon-total cost of leasing.

    Due-at-signing is spread over the lease's own term for the monthly
    figure but counted once in the total. A buyout only applies when the
    horizon reaches the end of the lease.
    """
    excess_miles_per_month = max(
        0.0, lease.est_miles_per_year / 12 - lease.mileage_allowance_per_year / 12
    )
    excess_mileage_cost_total = excess_miles_per_month * horizon_months * lease.est_excess_mile_fee
    excess_mileage_cost_monthly = excess_mileage_cost_total / horizon_months

    due_at_signing_monthly = lease.due_at_signing / lease.term_months
    running_costs = lease.est_monthly_insurance + lease.est_monthly_maintenance

    monthly_all_in = (
        lease.monthly_payment
        + due_at_signing_monthly
        + running_costs
        + excess_mileage_cost_monthly
    )

    buyout_cost = 0.0
    if lease.lease_end_plan == "buyout" and horizon_months >= lease.term_months:
        buyout_cost = lease.est_buyout_price or 0.0

    total_cost = (
        lease.due_at_signing
        + lease.monthly_payment * horizon_months
        + running_costs * horizon_months
        + excess_mileage_cost_total
        + buyout_cost
    )

    return LeaseCosts(
        monthly_all_in=monthly_all_in,
        total_cost=total_cost,
        excess_mileage_cost_total=excess_mileage_cost_total,
        buyout_cost=buyout_cost,
    )


def _buffer_months(remaining: float, monthly_fixed_expenses: float) -> float:
    if monthly_fixed_expenses == 0:
        return math.inf
    return remaining / monthly_fixed_expenses


def savings_flags(
    user: UserProfile,
    buy: BuyScenario,
    lease: LeaseScenario,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> List[str]:
    """Flag options whose upfront cash drains savings below a safe cushion"""
    flags: List[str] = []
    min_months = f"{policy.min_buffer_months:g}"

    buy_remaining = user.current_savings - buy.down_payment
    lease_remaining = user.current_savings - lease.due_at_signing

    if buy_remaining < 0:
        flags.append("Buy: Down payment exceeds current savings.")
    elif _buffer_months(buy_remaining, user.monthly_fixed_expenses) < policy.min_buffer_months:
        flags.append(
            f"Buy: Savings left after the down payment cover less than {min_months} months of fixed expenses."
        )

    if lease_remaining < 0:
        flags.append("Lease: Due at signing exceeds current savings.")
    elif _buffer_months(lease_remaining, user.monthly_fixed_expenses) < policy.min_buffer_months:
        flags.append(
            f"Lease: Savings left after signing cover less than {min_months} months of fixed expenses."
        )

    return flags


def choose_verdict(
    stress_gap: float,
    buy_total_cost: float,
    lease_total_cost: float,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> Verdict:
    """Lower stress wins when the gap is material; otherwise the cheaper option"""
    if abs(stress_gap) >= policy.verdict_stress_gap:
        return "buy" if stress_gap < 0 else "lease"
    return "buy" if buy_total_cost <= lease_total_cost else "lease"


def _has_negative_cash(breakdown: StressBreakdown) -> bool:
    return any(NEGATIVE_CASH_MARKER in flag.lower() for flag in breakdown.flags)


def grade_confidence(
    stress_gap: float,
    buy_shocked: StressBreakdown,
    lease_shocked: StressBreakdown,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> Confidence:
    """
    Confidence bands:
    - high: baseline or shocked gap >= 15, or only one option goes cash-negative under shock
    - medium: baseline or shocked gap >= 8
    - low: otherwise
    """
    abs_stress_gap = abs(stress_gap)
    abs_shock_gap = abs(buy_shocked.stress_score - lease_shocked.stress_score)

    if (
        abs_stress_gap >= policy.high_confidence_gap
        or abs_shock_gap >= policy.high_confidence_gap
        or _has_negative_cash(buy_shocked) != _has_negative_cash(lease_shocked)
    ):
        return "high"
    if abs_stress_gap >= policy.medium_confidence_gap or abs_shock_gap >= policy.medium_confidence_gap:
        return "medium"
    return "low"


def build_summary(
    verdict: Verdict,
    stress_gap: float,
    buy_total_cost: float,
    lease_total_cost: float,
    horizon_months: int,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> str:
    option = "Buying" if verdict == "buy" else "Leasing"
    first = f"{option} is safer based on cash-flow stress for your profile."

    abs_stress_gap = abs(stress_gap)
    if abs_stress_gap >= policy.verdict_stress_gap:
        second = f"Stress scores differ by {round_half_up(abs_stress_gap)} points."
    else:
        cheaper = "buying" if buy_total_cost <= lease_total_cost else "leasing"
        second = (
            f"Stress levels are close, so total cost breaks the tie: "
            f"{cheaper} is cheaper over {horizon_months} months."
        )

    return f"{first} {second}"


def collect_risk_flags(
    buy_stress: StressBreakdown,
    lease_stress: StressBreakdown,
    savings: List[str],
    buy_shocked: StressBreakdown,
    lease_shocked: StressBreakdown,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> List[str]:
    """Prefix, merge, dedupe by exact string (first seen wins) and cap"""
    flags = [f"Buy: {flag}" for flag in buy_stress.flags]
    flags += [f"Lease: {flag}" for flag in lease_stress.flags]
    flags += savings

    shock_gap = buy_shocked.stress_score - lease_shocked.stress_score
    if abs(shock_gap) >= policy.medium_confidence_gap:
        favored = "buying" if shock_gap < 0 else "leasing"
        flags.append(
            f"A {policy.income_shock_percent:g}% income drop favors {favored} "
            f"by {round_half_up(abs(shock_gap))} points."
        )

    return list(dict.fromkeys(flags))[: policy.risk_flag_cap]


def decide_buy_vs_lease(
    user: UserProfile,
    buy: BuyScenario,
    lease: LeaseScenario,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> DecisionResult:
    """
    Main entry point: compare buying and leasing over the buyer's ownership horizon.

    Flow:
    1. Validate every field (raises InvalidArgumentError naming the field)
    2. Cost both options over horizon = buy.ownership_months
    3. Score baseline stress and stress after an income shock
    4. Apply verdict and confidence policy
    5. Assemble summary and deduplicated risk flags
    """
    validate_inputs(user, buy, lease)

    horizon_months = buy.ownership_months

    buy_costs = calculate_buy_costs(buy, horizon_months, policy)
    lease_costs = calculate_lease_costs(lease, horizon_months)

    def baseline(car_all_in: float) -> StressBreakdown:
        return score_monthly_stress(
            monthly_net_income=user.monthly_net_income,
            monthly_fixed_expenses=user.monthly_fixed_expenses,
            monthly_car_all_in=car_all_in,
            risk_tolerance=user.risk_tolerance,
            policy=policy,
        )

    def shocked(car_all_in: float) -> StressBreakdown:
        return simulate_income_shock(
            monthly_net_income=user.monthly_net_income,
            monthly_fixed_expenses=user.monthly_fixed_expenses,
            monthly_car_all_in=car_all_in,
            risk_tolerance=user.risk_tolerance,
            income_drop_percent=policy.income_shock_percent,
            policy=policy,
        )

    buy_stress = baseline(buy_costs.monthly_all_in)
    lease_stress = baseline(lease_costs.monthly_all_in)
    buy_shocked = shocked(buy_costs.monthly_all_in)
    lease_shocked = shocked(lease_costs.monthly_all_in)

    stress_gap = buy_stress.stress_score - lease_stress.stress_score

    verdict = choose_verdict(stress_gap, buy_costs.total_cost, lease_costs.total_cost, policy)
    confidence = grade_confidence(stress_gap, buy_shocked, lease_shocked, policy)
    summary = build_summary(
        verdict, stress_gap, buy_costs.total_cost, lease_costs.total_cost, horizon_months, policy
    )
    risk_flags = collect_risk_flags(
        buy_stress,
        lease_stress,
        savings_flags(user, buy, lease, policy),
        buy_shocked,
        lease_shocked,
        policy,
    )

    return DecisionResult(
        verdict=verdict,
        confidence=confidence,
        summary=summary,
        buy_total_cost=clamp(buy_costs.total_cost, 0, MAX_SAFE_MONEY),
        lease_total_cost=clamp(lease_costs.total_cost, 0, MAX_SAFE_MONEY),
        buy_monthly_all_in=clamp(buy_costs.monthly_all_in, 0, MAX_SAFE_MONEY),
        lease_monthly_all_in=clamp(lease_costs.monthly_all_in, 0, MAX_SAFE_MONEY),
        buy_stress_score=clamp(buy_stress.stress_score, 0, 100),
        lease_stress_score=clamp(lease_stress.stress_score, 0, 100),
        risk_flags=tuple(risk_flags),
    )
